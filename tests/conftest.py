import io

import pytest

from lox.__main__ import Lox


class Result:
    def __init__(self, lox, out, err):
        self.lines = out.getvalue().splitlines()
        self.errors = err.getvalue().splitlines()
        self.exit_code = lox.exit_code()


@pytest.fixture
def run():
    def run(source):
        out, err = io.StringIO(), io.StringIO()
        lox = Lox(out, err)
        lox.run(source)
        return Result(lox, out, err)
    return run
