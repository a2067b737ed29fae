"""Rent reconciliation pipeline: fetch, load, reconcile, export and store."""

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

from rent_recon.config.settings import settings
from rent_recon.core.models import RawTable, ReconciliationReport
from rent_recon.core.reconciliation import run_reconciliation
from rent_recon.integrations import mongo_handler
from rent_recon.integrations.sftp_client import SFTPClient
from rent_recon.processors.report_writer import write_report
from rent_recon.processors.statement_processor import StatementProcessor

logger = logging.getLogger(__name__)


def download_statements(local_dir: Optional[str] = None) -> List[Path]:
    """Download statement files from the SFTP drop directory."""
    local_dir = local_dir or settings.DOWNLOAD_DIR
    client = SFTPClient(
        host=settings.SFTP_HOST,
        port=settings.SFTP_PORT,
        username=settings.SFTP_USERNAME,
        password=settings.SFTP_PASSWORD,
    )

    try:
        with client:
            downloaded = client.download_statement_files(settings.SFTP_REMOTE_DIR, local_dir)
    except ConnectionError as e:
        logger.warning(f"Skipping statement download: {e}")
        return []
    return [Path(local_dir) / name for name in downloaded]


def load_tables(processor: StatementProcessor) -> Dict[str, RawTable]:
    """Read tenant, bank and other payment tables."""
    return {
        "tenants": processor.read_tenant_rows(),
        "bank": processor.read_bank_rows(),
        "other": processor.read_other_rows(),
    }


def reconcile_tables(tables: Dict[str, RawTable], tolerance: Optional[float] = None) -> ReconciliationReport:
    """Match tenants against the combined bank and other payments."""
    if tolerance is None:
        tolerance = settings.MATCH_TOLERANCE
    report = run_reconciliation(tables["tenants"], tables["bank"], tables["other"], tolerance)
    logger.info(
        f"Reconciled {len(report.matches)} tenants against {report.payment_count} payments: "
        f"{report.summary.match_count} matched, {report.summary.mismatch_count} not matched"
    )
    return report


def export_report(report: ReconciliationReport, output_path, group_order: Optional[str] = None) -> Path:
    """Write the apartment-grouped report file."""
    return write_report(report, output_path, group_order or settings.EXPORT_GROUP_ORDER)


def store_report(report: ReconciliationReport, source_files: Optional[Dict[str, str]] = None) -> Dict:
    """Store reconciliation results to MongoDB."""
    return mongo_handler.store_reconciliation_results(
        settings.MONGO_URI,
        settings.DB_NAME,
        settings.RECONCILIATION_COLLECTION,
        report,
        source_files,
    )


def run_pipeline(
    processor: StatementProcessor,
    output_path=None,
    tolerance: Optional[float] = None,
    group_order: Optional[str] = None,
    store: bool = False,
    on_load: Optional[Callable[[Dict[str, RawTable]], None]] = None,
) -> ReconciliationReport:
    """
        Load, reconcile, then optionally export and store one run.

        ``on_load`` receives the loaded tables before matching (the CLI preview).
    """
    if store and not settings.MONGO_URI:
        raise ValueError("MONGO_URI must be set to store reconciliation results")

    tables = load_tables(processor)
    if on_load:
        on_load(tables)
    report = reconcile_tables(tables, tolerance)

    if output_path:
        export_report(report, output_path, group_order)
    if store:
        store_report(report, processor.source_files())

    return report
