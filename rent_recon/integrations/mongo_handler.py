from datetime import datetime
from pymongo import MongoClient
from typing import Dict, Optional
from contextlib import contextmanager
import uuid
import logging

from rent_recon.core.models import ReconciliationReport
from rent_recon.core.report import format_currency

logger = logging.getLogger(__name__)


@contextmanager
def get_mongo_connection(mongo_uri: str):
    client = None
    try:
        client = MongoClient(mongo_uri)
        yield client
    finally:
        if client:
            client.close()


def store_reconciliation_results(
    mongo_uri: str,
    db_name: str,
    reconciliation_collection: str,
    report: ReconciliationReport,
    source_files: Optional[Dict[str, str]] = None
) -> Dict:
    """
        Record one reconciliation run: a document per tenant result plus a summary document.
    """
    with get_mongo_connection(mongo_uri) as client:
        collection = client[db_name][reconciliation_collection]

        run_id = str(uuid.uuid4())
        now = datetime.now()
        run_metadata = {
            "reconciliation_run_id": run_id,
            "reconciliation_date": now,
            "created_at": now,
        }

        records = []
        for match in report.matches:
            rec = match.to_dict()
            rec.update(run_metadata)
            rec["record_type"] = "match"
            records.append(rec)

        summary = report.summary.to_dict()
        summary.update(run_metadata)
        summary["record_type"] = "summary"
        summary["source_files"] = dict(source_files or {})
        records.append(summary)

        collection.insert_many(records)

        _log_summary(run_id, report, len(records), db_name, reconciliation_collection)

        return {"run_id": run_id, "total_records": len(records)}


def _log_summary(
    run_id: str,
    report: ReconciliationReport,
    total_records: int,
    db_name: str,
    collection_name: str
) -> None:
    summary = report.summary
    logger.info("=" * 70)
    logger.info("RECONCILIATION SUMMARY")
    logger.info("=" * 70)
    logger.info(f"Run ID:                      {run_id}")
    logger.info(f"Total Records Inserted:      {total_records}")
    logger.info(f"  - Matched:                 {summary.match_count}")
    logger.info(f"  - Mismatched:              {summary.status_counts.get('mismatch', 0)}")
    logger.info(f"  - Missing:                 {summary.missing_count}")
    logger.info(f"Expected / Actual:           {format_currency(summary.total_expected)}"
                f" / {format_currency(summary.total_actual)}")
    logger.info(f"Collection:                  {db_name}.{collection_name}")
    logger.info("=" * 70)
