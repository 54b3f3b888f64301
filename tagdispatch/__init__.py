# -*- coding: utf-8 -*
"""Single dispatch on type tags: S3-style generic functions for Python.

See ``dir(tagdispatch)`` and submodule docstrings for more.
"""

__version__ = '0.1.0'

from .dispatcher import *  # noqa: F401, F403
from .registry import *  # noqa: F401, F403
from .tags import *  # noqa: F401, F403
