"""Shared gcov annotation fixtures."""

import pytest

# Annotated foo.c as written by ``gcov -b -f``.
FOO_C_GCOV = """\
        -:    0:Source:foo.c
        -:    0:Graph:foo.gcno
        -:    0:Data:foo.gcda
        -:    0:Runs:1
        -:    1:#include <stdio.h>
        -:    2:
function check called 4 returned 100% blocks executed 75%
        4:    3:int check(int x)
        -:    4:{
        4:    5:    if (x > 0)
branch  0 taken 100%
branch  1 taken 0% (fallthrough)
        4:    6:        return 1;
    #####:    7:    return 0;
        -:    8:}
        -:    9:
        3:   10:int x;
    #####:   11:int y;
call    0 never executed
        1:   12:    if (y)
branch  0 never executed
branch  1 taken 80%
        1:   13:        y++;
        -:   14:}
"""


@pytest.fixture
def foo_gcov_text() -> str:
    return FOO_C_GCOV
