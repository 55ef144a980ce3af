"""
GA stats persistence

Upserts daily summaries and question stats keyed by GA property + date
(+ question id) so a retried sync pass overwrites instead of duplicating.
"""
from datetime import date, datetime
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from sidestats.connectors.types import DailySummary, QuestionStat
from sidestats.errors import PersistenceError
from sidestats.models.base import SessionLocal
from sidestats.models.ga_stats import GaDailySummary, GaQuestionStat
from sidestats.models.sync_status import DataSyncStatus
from sidestats.utils.logger import log


class GaStatsRepository:
    """Database sink for the GA sync job"""

    def __init__(self, session_factory=None):
        self.session_factory = session_factory or SessionLocal

    def save(
        self,
        account_key: str,
        ga_id: str,
        sync_date: date,
        summary: DailySummary,
        questions: Dict[int, QuestionStat],
    ) -> Dict[str, int]:
        """
        Upsert one account's summary and question batch for sync_date.

        Returns:
            Dict with keys: created, updated
        """
        result = {"created": 0, "updated": 0}
        now = datetime.utcnow()
        db = self.session_factory()

        try:
            existing = db.query(GaDailySummary).filter(
                GaDailySummary.ga_id == ga_id,
                GaDailySummary.date == sync_date
            ).first()

            if existing is None:
                existing = GaDailySummary(ga_id=ga_id, date=sync_date)
                db.add(existing)
                result["created"] += 1
            else:
                result["updated"] += 1

            existing.account_key = account_key
            existing.active_users = summary.active_users
            existing.new_users = summary.new_users
            existing.sessions = summary.sessions
            existing.pageviews = summary.pageviews
            existing.engaged_sessions = summary.engaged_sessions
            existing.event_count = summary.event_count
            existing.bounce_rate = summary.bounce_rate
            existing.avg_session_duration = summary.avg_session_duration
            existing.synced_at = now

            if questions:
                rows = db.query(GaQuestionStat).filter(
                    GaQuestionStat.ga_id == ga_id,
                    GaQuestionStat.date == sync_date,
                    GaQuestionStat.question_id.in_(list(questions.keys()))
                ).all()
                by_id = {row.question_id: row for row in rows}

                for question_id, stat in questions.items():
                    row = by_id.get(question_id)
                    if row is None:
                        row = GaQuestionStat(ga_id=ga_id, date=sync_date, question_id=question_id)
                        db.add(row)
                        result["created"] += 1
                    else:
                        result["updated"] += 1

                    row.pageviews = stat.pageviews
                    row.users = stat.users
                    row.engagement_seconds = stat.engagement_seconds
                    row.paths = list(stat.paths)
                    row.synced_at = now

            db.commit()
            return result

        except SQLAlchemyError as e:
            db.rollback()
            log.error(f"Failed to save GA stats for {ga_id} on {sync_date}: {e}")
            raise PersistenceError(f"saving GA stats for {ga_id} failed: {e}") from e
        finally:
            db.close()

    def has_summary(self, ga_id: str, sync_date: date) -> bool:
        db = self.session_factory()
        try:
            return db.query(GaDailySummary.id).filter(
                GaDailySummary.ga_id == ga_id,
                GaDailySummary.date == sync_date
            ).first() is not None
        except SQLAlchemyError as e:
            raise PersistenceError(f"checking GA summary for {ga_id} failed: {e}") from e
        finally:
            db.close()

    def get_question_stats(self, ga_id: str, sync_date: date) -> List[GaQuestionStat]:
        db = self.session_factory()
        try:
            return db.query(GaQuestionStat).filter(
                GaQuestionStat.ga_id == ga_id,
                GaQuestionStat.date == sync_date
            ).order_by(GaQuestionStat.question_id).all()
        finally:
            db.close()

    def record_sync_status(
        self,
        source: str,
        success: bool,
        attempts: int = 0,
        retry_delay_seconds: float = 0.0,
        errors: Optional[List[str]] = None,
    ) -> None:
        """
        Upsert the data_sync_status row for source after a job run.

        This is the only place a give-up after exhausted retries is recorded
        outside the logs.
        """
        db = self.session_factory()
        try:
            status = db.query(DataSyncStatus).filter(
                DataSyncStatus.source_name == source
            ).first()

            if not status:
                status = DataSyncStatus(source_name=source)
                db.add(status)

            now = datetime.utcnow()
            status.last_sync_attempt = now
            status.attempts = attempts
            status.retry_delay_seconds = round(retry_delay_seconds, 2)
            status.retry_errors = (errors or [])[-5:] or None

            if success:
                status.sync_status = "success"
                status.last_successful_sync = now
                status.last_error = None
                status.error_count = 0
                status.first_error_at = None
                status.is_healthy = True
            else:
                status.sync_status = "failed"
                status.last_error = errors[-1][:500] if errors else None
                status.error_count = (status.error_count or 0) + 1
                if not status.first_error_at:
                    status.first_error_at = now
                status.is_healthy = False

            status.updated_at = now
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise PersistenceError(f"updating sync status for {source} failed: {e}") from e
        finally:
            db.close()

    def get_sync_status(self, source: str) -> Optional[dict]:
        db = self.session_factory()
        try:
            status = db.query(DataSyncStatus).filter(
                DataSyncStatus.source_name == source
            ).first()
            return status.to_dict() if status else None
        finally:
            db.close()
