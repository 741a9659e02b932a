"""Load configuration: delimiter, open-mode, encoding and numeric policy."""
from __future__ import annotations
import dataclasses
from dataclasses import dataclass
from typing import Any

import numpy as np

from csvframe.errors import ConfigError

DEFAULT_DELIMITER = ", "
DEFAULT_MODE = "r"
DEFAULT_ENCODING = "utf-8"

READ_MODES = ("r", "rt")


@dataclass(frozen=True)
class LoadOptions:
    """Options shared by the sizing and population passes.

    Attributes:
        delimiter: set of separator characters; any run of them splits fields
        mode: open-mode used when the source is a path
        encoding: text encoding used when the source is a path
        strict: raise on a non-numeric data token instead of substituting
        fill_value: value written for non-numeric tokens when not strict
        dtype: floating dtype of the matrix
    """
    delimiter: str = DEFAULT_DELIMITER
    mode: str = DEFAULT_MODE
    encoding: str = DEFAULT_ENCODING
    strict: bool = True
    fill_value: float = 0.0
    dtype: Any = np.float64

    def validate(self) -> "LoadOptions":
        if not isinstance(self.delimiter, str) or not self.delimiter:
            raise ConfigError("delimiter must be a non-empty string")
        if self.mode not in READ_MODES:
            raise ConfigError(f"open-mode must be one of {READ_MODES}, got {self.mode!r}")
        try:
            kind = np.dtype(self.dtype).kind
        except TypeError as e:
            raise ConfigError(f"invalid dtype {self.dtype!r}") from e
        if kind != "f":
            raise ConfigError(f"dtype must be a floating type, got {np.dtype(self.dtype)}")
        try:
            float(self.fill_value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"fill_value must be a number, got {self.fill_value!r}") from e
        return self

    def replace(self, **changes: Any) -> "LoadOptions":
        return dataclasses.replace(self, **changes)
