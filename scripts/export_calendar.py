"""Write the calendar CSV and SVG (plus a PNG when Kaleido is available).

Reads transactions from ``--input`` (columns id, date, amount, currency) or
generates a synthetic ledger when no input is given.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import pandas as pd

from calendar_heatmap import config, export, synth, viz
from calendar_heatmap.domain import Domain
from calendar_heatmap.pipeline import build_calendar

_logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Export a transaction calendar heatmap")
    parser.add_argument("--domain", choices=[member.key for member in Domain], default=Domain.EXPENSE.key)
    parser.add_argument("--input", type=Path, default=None, help="CSV of transactions; synthetic when omitted")
    parser.add_argument("--currency", default=config.DEFAULT_CURRENCY)
    parser.add_argument("--reference-year", type=int, default=None)
    parser.add_argument("--period-label", default=config.DEFAULT_PERIOD_LABEL)
    parser.add_argument("--width", type=int, default=config.SVG_DEFAULT_WIDTH)
    parser.add_argument("--seed", type=int, default=synth.DEFAULT_SEED)
    parser.add_argument("--png", action="store_true", help="Also try a PNG snapshot (needs kaleido)")
    parser.add_argument("--output", type=Path, default=config.EXPORT_DIR)
    return parser


def run(args: argparse.Namespace) -> list[Path]:
    domain = Domain.parse(args.domain)
    if args.input is not None:
        transactions = pd.read_csv(args.input)
    else:
        transactions = synth.generate_transactions(domain, seed=args.seed)

    view = build_calendar(
        transactions,
        domain,
        args.currency,
        reference_year=args.reference_year,
        period_label=args.period_label,
    )

    files = [export.export_csv(view), export.export_svg(view, args.width)]
    if args.png:
        image = export.export_image(view, viz.plot_calendar_heatmap(view), width=args.width)
        if image.filename not in {item.filename for item in files}:
            files.append(image)

    args.output.mkdir(parents=True, exist_ok=True)
    written = []
    for item in files:
        path = args.output / item.filename
        path.write_bytes(item.data)
        _logger.info("Wrote %s (%d bytes)", path, len(item.data))
        written.append(path)
    return written


def main(argv: list[str] | None = None) -> None:
    config.configure_logging()
    args = build_parser().parse_args(argv)
    for path in run(args):
        print(f"Wrote {path}")


if __name__ == "__main__":
    main()
