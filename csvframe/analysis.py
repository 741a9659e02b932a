"""Descriptive statistics for the columns of a loaded table.

Provides a Gaussian fit and simple normality tests per column, a combined
per-column summary and the Pearson correlation matrix.
"""
from __future__ import annotations
import warnings
from typing import Dict, List

import numpy as np
from scipy import stats

from csvframe.logging import get_logger
from csvframe.table import Table

logger = get_logger(__name__)


def fit_gaussian(values: np.ndarray) -> Dict[str, float]:
    """Fit a Gaussian to 1D data: sample mean and (population) standard deviation.

    Also returns the number of points.
    """
    values = np.asarray(values, dtype=float)
    n = int(values.size)
    if n == 0:
        return {'n': 0, 'mu': 0.0, 'sigma': 0.0}
    return {'n': n, 'mu': float(np.mean(values)), 'sigma': float(np.std(values, ddof=0))}


def normality_tests(values: np.ndarray) -> Dict[str, float]:
    """p-values of a few normality tests on 1D data.

    Keys: 'normaltest_pvalue' (D'Agostino-Pearson, needs 8+ points),
    'ks_pvalue' (Kolmogorov-Smirnov against the fitted normal) and
    'shapiro_pvalue' (Shapiro-Wilk). Fewer than 3 points gives an empty dict.
    """
    res: Dict[str, float] = {}
    values = np.asarray(values, dtype=float)
    values = values[np.isfinite(values)]
    if values.size < 3:
        return res
    mu = float(np.mean(values))
    sigma = float(np.std(values, ddof=0))
    if sigma <= 0:
        # no spread, nothing to test
        res['ks_pvalue'] = 0.0
        return res
    with warnings.catch_warnings():
        # small samples make scipy warn; the p-values still come back
        warnings.simplefilter('ignore', RuntimeWarning)
        warnings.simplefilter('ignore', UserWarning)
        if values.size >= 8:
            _, p_norm = stats.normaltest(values)
            res['normaltest_pvalue'] = float(p_norm)
        _, p_ks = stats.kstest(values, 'norm', args=(mu, sigma))
        res['ks_pvalue'] = float(p_ks)
        _, p_sh = stats.shapiro(values)
        res['shapiro_pvalue'] = float(p_sh)
    return res


def describe(values: np.ndarray) -> Dict[str, object]:
    values = np.asarray(values, dtype=float)
    if values.size == 0:
        return {
            'n': 0, 'mean': 0.0, 'std': 0.0, 'min': 0.0, 'max': 0.0, 'median': 0.0,
            'fit': fit_gaussian(values), 'tests': {},
        }
    return {
        'n': int(values.size),
        'mean': float(np.mean(values)),
        'std': float(np.std(values, ddof=1)) if values.size > 1 else 0.0,
        'min': float(np.min(values)),
        'max': float(np.max(values)),
        'median': float(np.median(values)),
        'fit': fit_gaussian(values),
        'tests': normality_tests(values),
    }


def column_summary(table: Table) -> Dict[str, Dict[str, object]]:
    """Per-column statistics keyed by header name, in column order.

    Unnamed or repeated header names are keyed as ``col<i>``.
    """
    summary: Dict[str, Dict[str, object]] = {}
    for i, name in enumerate(column_labels(table)):
        summary[name] = describe(table.column(i))
    logger.debug("summarised %d columns over %d rows", table.col_count, table.row_count)
    return summary


def column_labels(table: Table) -> List[str]:
    """Unique label per column: the header name, or ``col<i>`` for blank and
    repeated names (``col<i>_2``, ``col<i>_3``, ... if that is taken too)."""
    taken = set(table.header)
    labels: List[str] = []
    for i, name in enumerate(table.header):
        if name and name not in labels:
            labels.append(name)
            continue
        label = f'col{i}'
        n = 2
        while label in taken or label in labels:
            label = f'col{i}_{n}'
            n += 1
        labels.append(label)
    return labels


def correlation_matrix(table: Table) -> np.ndarray:
    """Pearson correlation between columns, shape (col_count, col_count).

    Constant columns give NaN entries. Fewer than two rows gives an all-NaN
    matrix.
    """
    n = table.col_count
    if n == 0:
        return np.zeros((0, 0))
    if table.row_count < 2:
        return np.full((n, n), np.nan)
    with np.errstate(divide='ignore', invalid='ignore'):
        corr = np.corrcoef(np.asarray(table.matrix, dtype=float), rowvar=False)
    return np.atleast_2d(corr)
