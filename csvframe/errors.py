"""Exceptions raised while sizing and loading delimited text sources.

Every pass failure derives from :class:`LoadError` and names the pass
(``"sizing"`` or ``"population"``) and the source it was reading.
"""
from __future__ import annotations
from typing import Optional


class CSVFrameError(Exception):
    """Base class for all csvframe errors."""


class ConfigError(CSVFrameError, ValueError):
    """Invalid delimiter, open-mode, dtype or numeric policy."""


class LoadError(CSVFrameError):
    """A sizing or population pass failed."""

    def __init__(self, reason: str, *, stage: str, source: str = "<stream>") -> None:
        super().__init__(f"{stage} pass failed for {source}: {reason}")
        self.reason = reason
        self.stage = stage
        self.source = source


class StreamOpenError(LoadError):
    """The source could not be opened, or a stream could not be rewound."""


class AllocationError(LoadError):
    """Memory for the matrix could not be obtained."""


class MalformedHeaderError(LoadError):
    """The header does not have one field per matrix column."""

    def __init__(self, *, expected: int, found: int, stage: str, source: str = "<stream>") -> None:
        super().__init__(
            f"header has {found} fields, expected {expected}",
            stage=stage,
            source=source,
        )
        self.expected = expected
        self.found = found


class MalformedRowError(LoadError):
    """A data row has a different number of fields than the table."""

    def __init__(
        self,
        *,
        row: int,
        line_no: int,
        expected: int,
        found: int,
        stage: str,
        source: str = "<stream>",
    ) -> None:
        super().__init__(
            f"row {row} (line {line_no}) has {found} fields, expected {expected}",
            stage=stage,
            source=source,
        )
        self.row = row          # 0-based data row index
        self.line_no = line_no  # 1-based line number, header is line 1
        self.expected = expected
        self.found = found


class NonNumericTokenError(LoadError, ValueError):
    """A data token could not be converted to a float in strict mode."""

    def __init__(
        self,
        *,
        row: int,
        col: int,
        token: str,
        column: Optional[str] = None,
        stage: str,
        source: str = "<stream>",
    ) -> None:
        where = f"row {row}, col {col}"
        if column:
            where += f" ({column!r})"
        super().__init__(f"{where}: {token!r} is not a number", stage=stage, source=source)
        self.row = row
        self.col = col
        self.token = token
        self.column = column


class SourceChangedError(LoadError):
    """The source yielded a different number of rows than the sizing pass counted."""
