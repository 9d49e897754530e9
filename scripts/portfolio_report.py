#!/usr/bin/env python3
"""Generate a synthetic microfinance portfolio and report its financial metrics.

This script builds a seeded portfolio of loans and chit funds, then prints:
- A lifetime snapshot across every product
- A weekly, monthly or yearly series ending at the report date

Defaults come from the environment (see ``MicrofinanceConfig.from_env``);
command-line flags override them.
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from microfinance.calculators import aggregate_lifetime, aggregate_recent
from microfinance.config import GRANULARITIES, MicrofinanceConfig, ReportConfig
from microfinance.exceptions import MicrofinanceError
from microfinance.logging import setup_logging
from microfinance.models.records import parse_instant
from microfinance.scenarios import PortfolioScenario
from microfinance.sinks import ConsoleSink, JsonFileSink

logger = logging.getLogger(__name__)


def build_parser(config: MicrofinanceConfig) -> argparse.ArgumentParser:
    """Build the argument parser, defaulting to ``config``."""
    parser = argparse.ArgumentParser(description="Microfinance portfolio report")
    parser.add_argument(
        "--granularity",
        choices=GRANULARITIES,
        default=config.report.granularity,
        help=f"Series granularity (default: {config.report.granularity})",
    )
    parser.add_argument(
        "--periods",
        type=int,
        default=config.report.periods,
        help=f"Number of periods in the series (default: {config.report.periods})",
    )
    parser.add_argument("--loans", type=int, default=config.generator.num_loans, help="Loans to generate")
    parser.add_argument(
        "--chit-funds", type=int, default=config.generator.num_chit_funds, help="Chit funds to generate"
    )
    parser.add_argument("--seed", type=int, default=config.seed, help="Random seed")
    parser.add_argument("--as-of", type=str, default=None, help="Report date, ISO 8601 (default: now)")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Also write JSON files to this directory",
    )
    parser.add_argument(
        "--export-records",
        action="store_true",
        help="Export the generated loans, repayments, chit funds, contributions and auctions",
    )
    parser.add_argument(
        "--max-records",
        type=int,
        default=5,
        help="Records printed per entity on the console (default: 5)",
    )
    return parser


def main() -> None:
    """Run the portfolio report."""
    try:
        config = MicrofinanceConfig.from_env()
    except MicrofinanceError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        sys.exit(2)

    args = build_parser(config).parse_args()
    setup_logging(
        level=config.log_level,
        format_type=config.log_format,
        calculator_level=config.calculator_log_level,
    )

    try:
        report = ReportConfig(
            granularity=args.granularity,
            periods=args.periods,
            money_quantum=config.report.money_quantum,
        )
        generator = replace(config.generator, num_loans=args.loans, num_chit_funds=args.chit_funds)
        as_of = parse_instant(args.as_of) if args.as_of else None

        scenario = PortfolioScenario(seed=args.seed, as_of=as_of, config=generator)
        store = scenario.generate()

        loans = store.loan_accounts()
        chit_funds = store.chit_fund_accounts()
        disbursements = store.disbursements()

        lifetime = aggregate_lifetime(loans, chit_funds, disbursements)
        series = aggregate_recent(
            loans,
            chit_funds,
            report.granularity,
            report.periods,
            scenario.as_of,
            disbursements=disbursements,
        )

        sinks = [ConsoleSink(pretty=True, max_records=args.max_records, money_quantum=report.money_quantum)]
        if args.output_dir is not None:
            sinks.append(
                JsonFileSink(
                    args.output_dir,
                    pretty=config.output.pretty_json,
                    money_quantum=report.money_quantum,
                )
            )

        for sink in sinks:
            sink.write_batch("summary", [scenario.get_portfolio_summary()])
            sink.write_batch("lifetime_metrics", [lifetime])
            sink.write_batch(f"{report.granularity}_metrics", series)

        if args.export_records:
            scenario.export(sinks)

        for sink in sinks:
            sink.close()
    except MicrofinanceError as exc:
        logger.error("Report failed: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
