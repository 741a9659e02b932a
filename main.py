"""Main runner for loading delimited numeric files and summarising them.

Usage: python main.py --input <path/to/file.csv> [--outdir analysis]
       python main.py --indir data [--pattern '*.csv'] [--lenient --fill-value nan]
"""
from __future__ import annotations
import argparse
import glob
import json
import logging
import os
import sys

from csvframe.analysis import column_summary, correlation_matrix
from csvframe.config import DEFAULT_DELIMITER, DEFAULT_ENCODING, LoadOptions
from csvframe.errors import CSVFrameError
from csvframe.io import load
from csvframe.logging import configure_logging, get_logger
from csvframe.plotting import plot_column_histograms, plot_columns

logger = get_logger("csvframe.main")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Load delimited numeric files into a table and summarise them")
    p.add_argument("--input", required=False, help="Path to a delimited file (optional)")
    p.add_argument("--indir", default="data", help="Directory to scan when --input is not given")
    p.add_argument("--pattern", default="*.csv", help="Glob used with --indir (default: *.csv)")
    p.add_argument("--delimiter", default=DEFAULT_DELIMITER,
                   help="Separator characters; any run of them splits fields (default: ', ')")
    p.add_argument("--encoding", default=DEFAULT_ENCODING, help="Text encoding (default: utf-8)")
    p.add_argument("--lenient", action="store_true",
                   help="Replace non-numeric tokens with --fill-value instead of failing")
    p.add_argument("--fill-value", type=float, default=0.0,
                   help="Value used for non-numeric tokens with --lenient (default: 0.0)")
    p.add_argument("--outdir", default="analysis", help="Directory to write results (default: analysis)")
    p.add_argument("--no-plots", action="store_true", help="Skip writing plots")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p


def output_labels(files):
    """Map each file to a unique output directory name based on its stem.

    Repeated stems (``a.csv`` and ``a.txt``) get ``_2``, ``_3``, ... appended.
    """
    labels = {}
    used = set()
    for filepath in files:
        stem = os.path.splitext(os.path.basename(filepath))[0]
        label = stem
        n = 2
        while label in used:
            label = f"{stem}_{n}"
            n += 1
        used.add(label)
        labels[filepath] = label
    return labels


def process_file(filepath: str, options: LoadOptions, outdir: str, plots: bool = True, label: str = None) -> dict:
    table = load(filepath, options=options)
    if label is None:
        label = os.path.splitext(os.path.basename(filepath))[0]

    print(f"Loaded {filepath}: {table.row_count} rows x {table.col_count} columns")
    print("  features: " + ", ".join(f'"{name}"' for name in table.header))

    stats = column_summary(table)
    for name, st in stats.items():
        print(f"  {name}: n={st['n']} mean={st['mean']:.6g} std={st['std']:.6g} "
              f"min={st['min']:.6g} max={st['max']:.6g}")

    summary = {
        'source': filepath,
        'label': label,
        'rows': table.row_count,
        'cols': table.col_count,
        'header': list(table.header),
        'columns': stats,
        'correlation': correlation_matrix(table).tolist(),
    }

    file_outdir = os.path.join(outdir, label)
    os.makedirs(file_outdir, exist_ok=True)
    with open(os.path.join(file_outdir, 'summary.json'), 'w') as fh:
        json.dump(summary, fh, indent=2)

    if plots and table.row_count:
        plot_columns(table, os.path.join(file_outdir, 'columns.png'))
        plot_column_histograms(table, file_outdir)
    return summary


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    options = LoadOptions(
        delimiter=args.delimiter,
        encoding=args.encoding,
        strict=not args.lenient,
        fill_value=args.fill_value,
    )
    try:
        options.validate()
    except CSVFrameError as e:
        print(f"Invalid options: {e}", file=sys.stderr)
        return 2

    # Determine files to process: either a single input file, or all matches in indir
    if args.input:
        files = [args.input]
    else:
        files = sorted(glob.glob(os.path.join(args.indir, args.pattern)))

    if not files:
        print(f"No input files found (input={args.input}, indir={args.indir}). Exiting.")
        return 1

    os.makedirs(args.outdir, exist_ok=True)
    summaries = {}
    failed = []
    labels = output_labels(files)
    for filepath in files:
        try:
            summaries[filepath] = process_file(
                filepath, options, args.outdir, plots=not args.no_plots, label=labels[filepath]
            )
        except CSVFrameError as e:
            logger.debug("failed to load %s", filepath, exc_info=True)
            print(f"Failed to load {filepath}: {e}", file=sys.stderr)
            failed.append(filepath)

    with open(os.path.join(args.outdir, 'summaries.json'), 'w') as fh:
        json.dump(summaries, fh, indent=2)

    print(f"Summaries written to: {args.outdir}")
    if failed:
        print(f"{len(failed)} of {len(files)} file(s) failed", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
