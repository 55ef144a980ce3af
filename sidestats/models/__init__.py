"""Database models for the side-stats service"""

from sidestats.models.ga_stats import GaDailySummary, GaQuestionStat
from sidestats.models.sync_status import DataSyncStatus

__all__ = [
    "GaDailySummary",
    "GaQuestionStat",
    "DataSyncStatus",
]
