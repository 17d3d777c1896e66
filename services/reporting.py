from __future__ import annotations

from typing import Optional

from models.import_report import ImportReport


def print_progress(total: int) -> None:
    print(f"Imported {total} records")


def print_summary(report: ImportReport, dead_letter_path: Optional[str] = None) -> None:
    """Print summary of the import run."""
    print("\n" + "="*60)
    print("IMPORT SUMMARY")
    print("="*60)
    print(f"Collection: {report.collection}")
    print(f"Rows Read: {report.rows_read}")
    print(f"Records Decoded: {report.records_decoded}")
    print(f"Rows Dropped: {report.rows_dropped}")
    print()
    print("Batches:")
    print(f"  Sent: {report.batches_sent}")
    print(f"  Failed: {report.batches_failed}")
    print()
    print("Documents:")
    print(f"  Imported: {report.documents_imported}")
    print(f"  Rejected: {report.documents_rejected}")
    print(f"  Unserializable: {report.documents_unserializable}")
    if dead_letter_path and report.dead_lettered:
        print(f"Dead Letter File: {dead_letter_path} ({report.dead_lettered} documents)")
    if report.partial:
        print("Result: PARTIAL")
    print("="*60)
