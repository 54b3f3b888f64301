# -*- coding: utf-8 -*-
"""pytest plumbing for the macro-enabled `unpythonic` test modules.

Each test module exposes a `runtests()` function (see `runtests.py`); pytest
collects those. A `runtests()` counts as failed if it made unpythonic's
global fail/error counters go up.
"""

import mcpyrate.activate  # noqa: F401

import pytest

from unpythonic.collections import unbox
from unpythonic.test.fixtures import session, tests_errored, tests_failed


@pytest.fixture(autouse=True)
def _unpythonic_session():
    with session():
        before = unbox(tests_failed) + unbox(tests_errored)
        yield
        after = unbox(tests_failed) + unbox(tests_errored)
    assert after == before, f"{after - before} unpythonic test(s) failed or errored"
