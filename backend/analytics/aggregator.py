"""
Analytics — summary statistics over the stored file records.
"""

from collections import defaultdict
from typing import Iterable

from backend.ingest.metadata import round_half_up
from backend.models import AnalyticsSummary, FileRecord, FileStatus, FileTypeStats
from backend.records import store

# Processing time is not measured by the pipeline; this is a display placeholder.
AVG_PROCESS_TIME_PLACEHOLDER = "1.85s"


def _rate(successful: int, total: int) -> float:
    return round_half_up(successful / total * 100, 1) if total else 0.0


def _mean(values: list[float]) -> float:
    return round_half_up(sum(values) / len(values), 1) if values else 0.0


def summarize(records: Iterable[FileRecord]) -> AnalyticsSummary:
    """Compute totals, success rate, mean size and a per-type breakdown."""
    records = list(records)
    completed = sum(1 for r in records if r.status is FileStatus.COMPLETED)

    # dicts keep first-seen order, so types appear as they occur in *records*
    groups: dict[str, list[FileRecord]] = defaultdict(list)
    for r in records:
        groups[r.display_type].append(r)

    file_types = [
        FileTypeStats(
            type=file_type,
            files=len(members),
            avg_size_kb=_mean([m.file_size_kb for m in members]),
            success_rate=_rate(
                sum(1 for m in members if m.status is FileStatus.COMPLETED),
                len(members),
            ),
        )
        for file_type, members in groups.items()
    ]

    return AnalyticsSummary(
        total_files=len(records),
        success_rate=_rate(completed, len(records)),
        avg_file_size_kb=_mean([r.file_size_kb for r in records]),
        avg_process_time=AVG_PROCESS_TIME_PLACEHOLDER,
        process_time_measured=False,
        file_types=file_types,
    )


def load_summary(db_path: str | None = None) -> AnalyticsSummary:
    """Read the current record set from the store and summarize it."""
    return summarize(store.list_all(db_path))
