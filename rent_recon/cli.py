"""
Command line entry point.

Usage:
    rent-recon --tenants tenants.csv --bank chase.csv [--other venmo.csv] [--out report.xlsx]
"""
import argparse
import logging
import sys
from pathlib import Path

from rent_recon.config.settings import settings
from rent_recon.core.parser import preview
from rent_recon.core.reconciliation import ReconciliationInputError
from rent_recon.core.report import GROUP_ORDERS, format_currency
from rent_recon.pipeline import download_statements, run_pipeline
from rent_recon.processors.statement_processor import StatementProcessor

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="rent-recon",
        description="Reconcile expected tenant rent against bank and other payment statements",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rent-recon --tenants tenants.csv --bank chase.csv
  rent-recon --tenants tenants.xlsx --bank chase.csv --skip-rows 4 --other venmo.csv --out may.xlsx
        """
    )
    ap.add_argument("--tenants", required=True, help="Tenant list (.csv, .xlsx or .xls)")
    ap.add_argument("--bank", help="Bank statement; only Zelle transfers are counted")
    ap.add_argument("--other", help="Other payment source, matched on its Description column")
    ap.add_argument("--skip-rows", type=int, default=settings.BANK_SKIP_ROWS,
                    help="Preamble lines to skip at the top of the bank statement")
    ap.add_argument("--out", help="Write the grouped report to this .xlsx or .csv file")
    ap.add_argument("--group-order", choices=GROUP_ORDERS, default=settings.EXPORT_GROUP_ORDER,
                    help="Order of apartment groups in the report")
    ap.add_argument("--tolerance", type=float, default=settings.MATCH_TOLERANCE,
                    help="Largest difference still reported as a match (exclusive)")
    ap.add_argument("--fetch", action="store_true",
                    help="Download statements from SFTP first; relative paths resolve in the download dir")
    ap.add_argument("--store", action="store_true", help="Store the run in MongoDB (requires MONGO_URI)")
    ap.add_argument("--preview", action="store_true", help="Log the first rows of every loaded table")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    return ap


def _resolve(path, fetched_dir):
    if path is None or fetched_dir is None or Path(path).exists():
        return path
    return str(Path(fetched_dir) / path)


def _log_preview(tables) -> None:
    for name, table in tables.items():
        columns, rows = preview(table)
        logger.info(f"{name}: {len(table)} rows, columns {columns}")
        for row in rows:
            logger.info(f"  {row}")


def _print_results(report) -> None:
    for match in report.matches:
        print(
            f"{match.status.upper():<9} {match.tenant_name or match.payer_key:<30} "
            f"expected {format_currency(match.expected_rent):>12}  "
            f"received {format_currency(match.actual_amount):>12}  "
            f"diff {format_currency(match.difference):>12}"
        )
    summary = report.summary
    print(
        f"\nExpected {format_currency(summary.total_expected)} | "
        f"Received {format_currency(summary.total_actual)} | "
        f"Difference {format_currency(summary.total_difference)} | "
        f"{summary.match_count} matched, {summary.mismatch_count} not matched "
        f"({summary.missing_count} missing)"
    )


def log_level(verbose: bool) -> int:
    if verbose:
        return logging.DEBUG
    level = logging.getLevelName(settings.LOG_LEVEL.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level '{settings.LOG_LEVEL}' in RECON_LOG_LEVEL")
    return level


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        logging.basicConfig(level=log_level(args.verbose), format="%(levelname)s: %(message)s")

        fetched_dir = None
        if args.fetch:
            download_statements(settings.DOWNLOAD_DIR)
            fetched_dir = settings.DOWNLOAD_DIR

        processor = StatementProcessor(
            tenant_path=_resolve(args.tenants, fetched_dir),
            bank_path=_resolve(args.bank, fetched_dir),
            other_path=_resolve(args.other, fetched_dir),
            bank_skip_rows=args.skip_rows,
        )
        report = run_pipeline(
            processor,
            output_path=args.out,
            tolerance=args.tolerance,
            group_order=args.group_order,
            store=args.store,
            on_load=_log_preview if args.preview else None,
        )
        _print_results(report)
        return 0
    except ReconciliationInputError as e:
        logger.error(f"Cannot reconcile: {e}")
        return 1
    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Validation error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
