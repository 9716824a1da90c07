"""Batch jobs over catalog snapshots."""

from trustbox.jobs.rank_catalog import RankedEntry, RankSummary, run_rank_catalog

__all__ = [
    "RankedEntry",
    "RankSummary",
    "run_rank_catalog",
]
