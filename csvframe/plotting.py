"""Plotting helpers for loaded tables.

Creates and saves common diagnostic plots.
"""
from __future__ import annotations
import os
from typing import List, Union

import numpy as np
import matplotlib.pyplot as plt

from csvframe.analysis import column_labels
from csvframe.table import Table


def plot_columns(table: Table, outpath: str):
    """Plot every column against row index, one stacked panel per column (thin lines)."""
    n = table.col_count
    if n == 0:
        return
    labels = column_labels(table)
    rows = np.arange(table.row_count)
    fig, axes = plt.subplots(n, 1, sharex=True, figsize=(6, 1.6 * n + 1), squeeze=False)
    for i, ax in enumerate(axes[:, 0]):
        ax.plot(rows, table.column(i), linestyle='-', linewidth=0.8)
        ax.set_ylabel(labels[i])
    axes[-1, 0].set_xlabel('Row')
    fig.tight_layout()
    fig.savefig(outpath, dpi=150)
    plt.close(fig)


def plot_hist_with_gaussian(values: np.ndarray, outpath: str, bins: int = 30, label: str = "Value"):
    """Plot histogram of `values` with an overlaid Gaussian PDF computed from sample mean/std."""
    values = np.asarray(values, dtype=float)
    values = values[np.isfinite(values)]
    if values.size == 0:
        return
    mu = float(np.mean(values))
    sigma = float(np.std(values, ddof=0))
    fig, ax = plt.subplots(figsize=(5, 3))
    _, edges, _ = ax.hist(values, bins=bins, density=True, alpha=0.6, label='data')
    if sigma > 0:
        xs = np.linspace(edges[0], edges[-1], 200)
        ys = 1.0 / (sigma * np.sqrt(2 * np.pi)) * np.exp(-0.5 * ((xs - mu) / sigma) ** 2)
        ax.plot(xs, ys, '-', linewidth=0.9, label=f'Gaussian fit (mu={mu:.2f}, sigma={sigma:.2f})')
    ax.set_xlabel(label or 'Value')
    ax.set_ylabel('Probability density')
    ax.legend(fontsize='small')
    fig.tight_layout()
    fig.savefig(outpath, dpi=150)
    plt.close(fig)


def plot_column_histograms(table: Table, outdir: str, bins: int = 30) -> List[str]:
    """Write `<label>_hist.png` for each non-empty column and return the paths."""
    os.makedirs(outdir, exist_ok=True)
    written = []
    if table.row_count == 0:
        return written
    for i, label in enumerate(column_labels(table)):
        path = os.path.join(outdir, f'{label}_hist.png')
        plot_hist_with_gaussian(table.column(i), path, bins=bins, label=label)
        if os.path.exists(path):
            written.append(path)
    return written


def plot_scatter(table: Table, x: Union[str, int], y: Union[str, int], outpath: str):
    """Scatter one column against another."""
    xs = table.column(x)
    ys = table.column(y)
    fig, ax = plt.subplots(figsize=(5, 5))
    ax.scatter(xs, ys, s=8)
    ax.set_xlabel(x if isinstance(x, str) else table.header[x] or f'col{x}')
    ax.set_ylabel(y if isinstance(y, str) else table.header[y] or f'col{y}')
    fig.tight_layout()
    fig.savefig(outpath, dpi=150)
    plt.close(fig)
