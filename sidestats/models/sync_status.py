"""
Sync status model

One row per synced source with the outcome of its last job run.
"""
from sqlalchemy import Column, Integer, String, Float, DateTime, JSON, Boolean, Text
from datetime import datetime

from sidestats.models.base import Base


class DataSyncStatus(Base):
    """
    Track data sync status for each source

    Monitors last sync time, success/failure, error messages
    """
    __tablename__ = "data_sync_status"

    id = Column(Integer, primary_key=True, index=True)

    source_name = Column(String, unique=True, index=True)  # ga

    # Sync status
    last_sync_attempt = Column(DateTime, index=True)
    last_successful_sync = Column(DateTime, index=True, nullable=True)
    sync_status = Column(String, index=True)  # success, failed

    # Retry tracking for the last run
    attempts = Column(Integer, default=0)
    retry_delay_seconds = Column(Float, default=0.0)
    retry_errors = Column(JSON, nullable=True)

    # Error tracking
    last_error = Column(Text, nullable=True)
    error_count = Column(Integer, default=0)  # Consecutive failed runs
    first_error_at = Column(DateTime, nullable=True)

    is_healthy = Column(Boolean, default=True, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "source_name": self.source_name,
            "sync_status": self.sync_status,
            "last_sync_attempt": self.last_sync_attempt.isoformat() if self.last_sync_attempt else None,
            "last_successful_sync": self.last_successful_sync.isoformat() if self.last_successful_sync else None,
            "attempts": self.attempts,
            "retry_delay_seconds": self.retry_delay_seconds,
            "retry_errors": self.retry_errors,
            "last_error": self.last_error,
            "error_count": self.error_count,
            "is_healthy": self.is_healthy,
        }
