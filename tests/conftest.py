import io
import os

os.environ.setdefault("MPLBACKEND", "Agg")

import pytest


@pytest.fixture
def write_csv(tmp_path):
    """Write `text` to a file under tmp_path and return its path as a str."""
    def _write(text, name="data.csv", newline=None):
        path = tmp_path / name
        with open(path, "w", encoding="utf-8", newline=newline) as fh:
            fh.write(text)
        return str(path)
    return _write


class RewriteOnSecondPass(io.StringIO):
    """StringIO whose contents are replaced the second time it is rewound."""

    def __init__(self, first, second):
        super().__init__(first)
        self.second = second
        self.rewinds = 0

    def seek(self, pos, whence=0):
        self.rewinds += 1
        if self.rewinds == 2:
            super().seek(0)
            super().truncate(0)
            super().write(self.second)
        return super().seek(pos, whence)


class Unseekable(io.StringIO):
    def seekable(self):
        return False


@pytest.fixture
def rewrite_on_second_pass():
    return RewriteOnSecondPass


@pytest.fixture
def unseekable():
    return Unseekable


class RewindFailsOnSecondPass(io.StringIO):
    """StringIO that can be rewound once; the second rewind fails."""

    def __init__(self, text):
        super().__init__(text)
        self.rewinds = 0

    def seek(self, pos, whence=0):
        self.rewinds += 1
        if self.rewinds == 2:
            raise OSError("device went away")
        return super().seek(pos, whence)


@pytest.fixture
def rewind_fails_on_second_pass():
    return RewindFailsOnSecondPass
