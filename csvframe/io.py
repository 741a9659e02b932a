"""I/O utilities for loading delimited numeric text files.

Loading runs in two passes over the same source. The sizing pass counts the
data rows and takes the column count from the first data row; the population
pass allocates a matrix of exactly that shape, reads the header and fills the
matrix row by row. A source is either a path, opened afresh for each pass, or
a seekable text stream, rewound before each pass and left open.

Blank lines are ignored everywhere; the first non-blank line is the header.
"""
from __future__ import annotations
import functools
import os
import re
from contextlib import contextmanager
from typing import Iterator, List, Optional, TextIO, Tuple, Union

import numpy as np

from csvframe.config import (
    DEFAULT_DELIMITER,
    DEFAULT_ENCODING,
    DEFAULT_MODE,
    READ_MODES,
    LoadOptions,
)
from csvframe.errors import (
    ConfigError,
    MalformedHeaderError,
    MalformedRowError,
    NonNumericTokenError,
    SourceChangedError,
    StreamOpenError,
)
from csvframe.logging import get_logger
from csvframe.table import Table, allocate_matrix

logger = get_logger(__name__)

Source = Union[str, "os.PathLike[str]", TextIO]


@functools.lru_cache(maxsize=32)
def _splitter(delimiter: str) -> "re.Pattern[str]":
    return re.compile("[" + re.escape(delimiter) + "]+")


def tokenize(line: str, delimiter: str = DEFAULT_DELIMITER) -> List[str]:
    """Split `line` on runs of any character in `delimiter`.

    Empty tokens are dropped and the line terminator is not part of any
    token, so ``tokenize("1.5, 2.0, 3\\n", ", ")`` gives ``["1.5", "2.0", "3"]``.
    There is no quoting or escaping.
    """
    if not delimiter:
        raise ConfigError("delimiter must be a non-empty string")
    return [tok for tok in _splitter(delimiter).split(line.rstrip("\r\n")) if tok]


def sanitize(token: str) -> str:
    """Keep only the alphanumeric characters of `token` ("abc!@123" -> "abc123")."""
    return "".join(ch for ch in token if ch.isalnum())


def _source_name(source) -> str:
    if isinstance(source, (str, os.PathLike)):
        return os.fspath(source)
    name = getattr(source, "name", None)
    return name if isinstance(name, str) else "<stream>"


@contextmanager
def open_source(
    source: Source,
    stage: str,
    mode: str = DEFAULT_MODE,
    encoding: str = DEFAULT_ENCODING,
) -> Iterator[TextIO]:
    """Yield a text stream positioned at the start of `source` for one pass.

    Paths are opened here and closed on exit. Streams belong to the caller:
    they are rewound but not closed.
    """
    name = _source_name(source)
    if isinstance(source, (str, os.PathLike)):
        if mode not in READ_MODES:
            raise ConfigError(f"open-mode must be one of {READ_MODES}, got {mode!r}")
        try:
            fh = open(source, mode, encoding=encoding)
        except OSError as e:
            raise StreamOpenError(e.strerror or str(e), stage=stage, source=name) from e
        logger.debug("%s pass: opened %s", stage, name)
        with fh:
            yield fh
        logger.debug("%s pass: closed %s", stage, name)
        return

    if getattr(source, "closed", False):
        raise StreamOpenError("stream is closed", stage=stage, source=name)
    seekable = getattr(source, "seekable", None)
    if seekable is None or not seekable():
        raise StreamOpenError(
            "stream is not seekable; pass a path or an in-memory buffer",
            stage=stage,
            source=name,
        )
    try:
        source.seek(0)
    except (OSError, ValueError) as e:
        raise StreamOpenError(f"cannot rewind stream: {e}", stage=stage, source=name) from e
    yield source


def _numbered_lines(fh: TextIO, stage: str, name: str) -> Iterator[Tuple[int, str]]:
    """Yield (line_no, line) for the non-blank lines of `fh`, numbering from 1."""
    it = iter(fh)
    line_no = 0
    while True:
        try:
            line = next(it)
        except StopIteration:
            return
        except (OSError, UnicodeDecodeError) as e:
            raise StreamOpenError(
                f"cannot read line {line_no + 1}: {e}", stage=stage, source=name
            ) from e
        line_no += 1
        if line.strip():
            yield line_no, line


def size_of(
    source: Source,
    delimiter: str = DEFAULT_DELIMITER,
    *,
    mode: str = DEFAULT_MODE,
    encoding: str = DEFAULT_ENCODING,
) -> Tuple[int, int]:
    """Sizing pass: return (data_rows, columns) for `source`.

    The header is never counted as a row. The column count comes from the
    first data row and is not checked against later rows here; the
    population pass does that. A header-only source sizes as (0, number of
    header fields) and an empty source as (0, 0).
    """
    if not delimiter:
        raise ConfigError("delimiter must be a non-empty string")
    name = _source_name(source)
    rows = cols = 0
    with open_source(source, "sizing", mode, encoding) as fh:
        lines = _numbered_lines(fh, "sizing", name)
        header = next(lines, None)
        if header is None:
            logger.debug("sizing pass: %s is empty", name)
            return 0, 0
        for _, line in lines:
            if rows == 0:
                cols = len(tokenize(line, delimiter))
            rows += 1
    if rows == 0:
        cols = len(tokenize(header[1], delimiter))
        logger.debug("sizing pass: %s has a header but no data rows", name)
    logger.debug("sizing pass: %s has %d rows x %d columns", name, rows, cols)
    return rows, cols


def _read_header(lines, cols: int, opts: LoadOptions, name: str) -> Tuple[str, ...]:
    first = next(lines, None)
    if first is None:
        if cols:
            raise SourceChangedError("header line disappeared", stage="population", source=name)
        return ()
    header = tuple(sanitize(tok) for tok in tokenize(first[1], opts.delimiter))
    if len(header) != cols:
        raise MalformedHeaderError(expected=cols, found=len(header), stage="population", source=name)
    return header


def _parse_number(token: str) -> float:
    # float() also takes Python digit separators such as "1_000"
    if "_" in token:
        raise ValueError(token)
    return float(token)


def _to_float(token: str, row: int, col: int, header, opts: LoadOptions, name: str) -> Optional[float]:
    try:
        return _parse_number(token)
    except ValueError:
        if opts.strict:
            raise NonNumericTokenError(
                row=row, col=col, token=token, column=header[col] or None,
                stage="population", source=name,
            ) from None
        logger.debug("population pass: %s row %d col %d: %r -> %r", name, row, col, token, opts.fill_value)
        return None


def _fill_rows(lines, matrix: np.ndarray, header, opts: LoadOptions, name: str) -> int:
    rows, cols = matrix.shape
    fill = float(opts.fill_value)
    substituted = 0
    filled = 0
    for row, (line_no, line) in enumerate(lines):
        if row >= rows:
            raise SourceChangedError(
                f"more than the {rows} data rows counted by the sizing pass",
                stage="population",
                source=name,
            )
        tokens = tokenize(line, opts.delimiter)
        if len(tokens) != cols:
            raise MalformedRowError(
                row=row, line_no=line_no, expected=cols, found=len(tokens),
                stage="population", source=name,
            )
        for col, token in enumerate(tokens):
            value = _to_float(token, row, col, header, opts, name)
            if value is None:
                value = fill
                substituted += 1
            matrix[row, col] = value
        filled = row + 1
    if substituted:
        logger.warning(
            "%s: substituted %r for %d non-numeric token(s)", name, opts.fill_value, substituted
        )
    return filled


def load(
    source: Source,
    delimiter: Optional[str] = None,
    *,
    options: Optional[LoadOptions] = None,
    **overrides,
) -> Table:
    """Load `source` into a :class:`Table`.

    Args:
        source: path, or seekable text stream holding the delimited text
        delimiter: separator characters; overrides ``options.delimiter``
        options: a :class:`LoadOptions`; defaults are used when omitted
        **overrides: individual :class:`LoadOptions` fields, e.g. ``strict=False``

    Raises:
        StreamOpenError, AllocationError, MalformedHeaderError,
        MalformedRowError, NonNumericTokenError, SourceChangedError.
        No partially filled table is ever returned.
    """
    opts = options or LoadOptions()
    if delimiter is not None:
        overrides["delimiter"] = delimiter
    if overrides:
        opts = opts.replace(**overrides)
    opts.validate()
    name = _source_name(source)

    rows, cols = size_of(source, opts.delimiter, mode=opts.mode, encoding=opts.encoding)
    matrix = allocate_matrix(rows, cols, opts.dtype, source=name)

    with open_source(source, "population", opts.mode, opts.encoding) as fh:
        lines = _numbered_lines(fh, "population", name)
        header = _read_header(lines, cols, opts, name)
        filled = _fill_rows(lines, matrix, header, opts, name)

    if filled != rows:
        raise SourceChangedError(
            f"found {filled} data rows, the sizing pass counted {rows}",
            stage="population",
            source=name,
        )
    logger.debug("population pass: loaded %s as %d x %d", name, rows, cols)
    matrix.setflags(write=False)
    return Table(delimiter=opts.delimiter, header=header, matrix=matrix)
