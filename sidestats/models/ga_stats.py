"""
Google Analytics Stats Models

Daily site summary and per-question page metrics, one row per GA property per day.
"""
from sqlalchemy import Column, Integer, BigInteger, String, Float, DateTime, JSON, Date, UniqueConstraint
from datetime import datetime

from sidestats.models.base import Base


class GaDailySummary(Base):
    """Site-wide metrics for one GA property on one day"""
    __tablename__ = "ga_daily_summaries"
    __table_args__ = (
        UniqueConstraint("ga_id", "date", name="uq_ga_daily_summary_ga_id_date"),
    )

    id = Column(Integer, primary_key=True, index=True)

    # Account
    account_key = Column(String, index=True, nullable=False)
    ga_id = Column(String, index=True, nullable=False)

    # Stamped sync date
    date = Column(Date, index=True, nullable=False)

    # Traffic metrics
    active_users = Column(Integer, default=0)
    new_users = Column(Integer, default=0)
    sessions = Column(Integer, default=0)
    pageviews = Column(Integer, default=0)
    engaged_sessions = Column(Integer, default=0)
    event_count = Column(Integer, default=0)

    # Engagement metrics
    bounce_rate = Column(Float, nullable=True)
    avg_session_duration = Column(Float, nullable=True)
    # In seconds

    # Metadata
    synced_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<GaDailySummary {self.account_key} ({self.ga_id}) - {self.date}>"


class GaQuestionStat(Base):
    """Page metrics for one question on one day"""
    __tablename__ = "ga_question_stats"
    __table_args__ = (
        UniqueConstraint("ga_id", "date", "question_id", name="uq_ga_question_stat_ga_id_date_question"),
    )

    id = Column(Integer, primary_key=True, index=True)

    ga_id = Column(String, index=True, nullable=False)
    date = Column(Date, index=True, nullable=False)
    question_id = Column(BigInteger, index=True, nullable=False)

    pageviews = Column(Integer, default=0)
    users = Column(Integer, default=0)
    engagement_seconds = Column(Float, default=0)
    paths = Column(JSON, nullable=True)
    # e.g., ["/questions/101", "/questions/101/answers"]

    synced_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<GaQuestionStat {self.question_id} ({self.ga_id}) - {self.date}>"
