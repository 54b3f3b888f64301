# -*- coding: utf-8 -*-
"""Run all tests for `tagdispatch`.

The test framework uses macros, but this top-level script does not. This can be
run under regular `python3` (i.e. does not need the `macropython` wrapper from
`mcpyrate`).
"""

import os
import re
import sys
from importlib import import_module

from unpythonic.test.fixtures import session, testset, tests_errored, tests_failed
from unpythonic.collections import unbox

import mcpyrate.activate  # noqa: F401

def listtestmodules(path):
    testfiles = listtestfiles(path)
    testmodules = [modname(path, fn) for fn in testfiles]
    return list(sorted(testmodules))

def listtestfiles(path, prefix="test_", suffix=".py"):
    return [fn for fn in os.listdir(path) if fn.startswith(prefix) and fn.endswith(suffix)]

def modname(path, filename):  # some/dir/mod.py --> some.dir.mod
    modpath = re.sub(os.path.sep, r".", path)
    themod = re.sub(r"\.py$", r"", filename)
    return ".".join([modpath, themod])

def main():
    with session():
        modnames = listtestmodules(os.path.join("tagdispatch", "tests"))
        for m in modnames:
            # One testset per module, so an ImportError or a macro expansion
            # failure in one module is reported without stopping the others.
            with testset(m):
                # Module names are relative to the project root; run from there.
                mod = import_module(m)
                mod.runtests()
    all_passed = (unbox(tests_failed) + unbox(tests_errored)) == 0
    return all_passed

if __name__ == '__main__':
    if not main():
        sys.exit(1)  # pragma: no cover, this only runs when the tests fail.
