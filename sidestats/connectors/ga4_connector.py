"""
Google Analytics 4 data connector
Fetches realtime users, daily site summary and per-question page metrics

This is the analytics client used by SideStatsService and GaSyncJob.
"""
import re
from typing import Dict, Optional
from datetime import datetime
from google.analytics.data_v1beta import BetaAnalyticsDataClient
from google.analytics.data_v1beta.types import (
    DateRange,
    Dimension,
    Filter,
    FilterExpression,
    Metric,
    RunRealtimeReportRequest,
    RunReportRequest,
)
from google.oauth2 import service_account
from sidestats.connectors.base_connector import AnalyticsClient
from sidestats.connectors.types import DailySummary, QuestionStat
from sidestats.errors import ConfigurationError, ProviderError
from sidestats.utils.helpers import DAY
from sidestats.utils.logger import log

QUESTION_URI = re.compile(r"^/questions/(\d+)")

SCOPES = ["https://www.googleapis.com/auth/analytics.readonly"]


class GA4Connector(AnalyticsClient):
    """Connector for Google Analytics 4"""

    PAGE_LIMIT = 10000

    def __init__(self, key_file: Optional[str] = None, client=None, timeout: float = 15.0):
        super().__init__("Google Analytics 4", timeout=timeout)
        self.key_file = key_file
        self.client = client

    def connect(self) -> BetaAnalyticsDataClient:
        """Build the GA4 client from the service account key file"""
        if self.client is not None:
            return self.client

        if not self.key_file:
            raise ConfigurationError("no service key file configured", provider=self.name)

        try:
            credentials = service_account.Credentials.from_service_account_file(
                self.key_file,
                scopes=SCOPES
            )
            self.client = BetaAnalyticsDataClient(credentials=credentials)
        except Exception as e:
            log.error(f"Failed to connect to GA4: {str(e)}")
            raise ProviderError(f"failed to connect: {e}", provider=self.name) from e

        log.info("Connected to Google Analytics 4")
        return self.client

    def validate_connection(self) -> bool:
        """Validate GA4 connection by building the client"""
        try:
            self.connect()
            return True
        except ProviderError:
            return False

    def _run(self, method: str, request):
        client = self.connect()
        try:
            response = getattr(client, method)(request, timeout=self.timeout)
        except Exception as e:
            self._record_call(e)
            log.error(f"GA4 {method} failed for {request.property}: {str(e)}")
            raise ProviderError(f"{method} failed: {e}", provider=self.name) from e
        self._record_call()
        return response

    def _date_range(self, start: datetime, end: datetime) -> DateRange:
        """GA4 date ranges are inclusive, so [start, end) ends the day before end"""
        last_day = max(end - DAY, start)
        return DateRange(
            start_date=start.strftime("%Y-%m-%d"),
            end_date=last_day.strftime("%Y-%m-%d")
        )

    def get_realtime(self, ga_id: str) -> int:
        """Active users over the last 30 minutes"""
        request = RunRealtimeReportRequest(
            property=f"properties/{ga_id}",
            metrics=[Metric(name="activeUsers")],
        )
        response = self._run("run_realtime_report", request)

        if not response.rows:
            return 0
        return int(response.rows[0].metric_values[0].value)

    def get_summary_data(self, ga_id: str, start: datetime, end: datetime) -> DailySummary:
        request = RunReportRequest(
            property=f"properties/{ga_id}",
            date_ranges=[self._date_range(start, end)],
            metrics=[
                Metric(name="activeUsers"),
                Metric(name="newUsers"),
                Metric(name="sessions"),
                Metric(name="screenPageViews"),
                Metric(name="engagedSessions"),
                Metric(name="bounceRate"),
                Metric(name="averageSessionDuration"),
                Metric(name="eventCount"),
            ],
        )
        response = self._run("run_report", request)

        if not response.rows:
            log.warning(f"GA4 returned no summary rows for {ga_id}")
            return DailySummary()

        try:
            values = [v.value for v in response.rows[0].metric_values]
            return DailySummary(
                active_users=int(values[0]),
                new_users=int(values[1]),
                sessions=int(values[2]),
                pageviews=int(values[3]),
                engaged_sessions=int(values[4]),
                bounce_rate=float(values[5]),
                avg_session_duration=float(values[6]),
                event_count=int(values[7]),
            )
        except (IndexError, ValueError) as e:
            raise ProviderError(f"malformed summary row for {ga_id}: {e}", provider=self.name) from e

    def get_entity_breakdown(self, ga_id: str, start: datetime, end: datetime) -> Dict[int, QuestionStat]:
        """
        Page metrics for question pages, one record per question id.

        Several paths can belong to the same question (/questions/101,
        /questions/101/answers); their metrics are summed into one record.
        """
        questions: Dict[int, QuestionStat] = {}
        offset = 0

        while True:
            request = RunReportRequest(
                property=f"properties/{ga_id}",
                date_ranges=[self._date_range(start, end)],
                dimensions=[Dimension(name="pagePath")],
                metrics=[
                    Metric(name="screenPageViews"),
                    Metric(name="activeUsers"),
                    Metric(name="userEngagementDuration"),
                ],
                dimension_filter=FilterExpression(
                    filter=Filter(
                        field_name="pagePath",
                        string_filter=Filter.StringFilter(
                            match_type=Filter.StringFilter.MatchType.BEGINS_WITH,
                            value="/questions/",
                        ),
                    )
                ),
                offset=offset,
                limit=self.PAGE_LIMIT,
            )
            response = self._run("run_report", request)

            for row in response.rows:
                path = row.dimension_values[0].value
                match = QUESTION_URI.match(path)
                if not match:
                    continue

                question_id = int(match.group(1))
                try:
                    pageviews = int(row.metric_values[0].value)
                    users = int(row.metric_values[1].value)
                    engagement = float(row.metric_values[2].value)
                except (IndexError, ValueError) as e:
                    raise ProviderError(f"malformed page row {path}: {e}", provider=self.name) from e

                stat = questions.get(question_id)
                if stat is None:
                    stat = questions[question_id] = QuestionStat(question_id=question_id)
                stat.merge(pageviews, users, engagement, path)

            if len(response.rows) < self.PAGE_LIMIT:
                break

            offset += self.PAGE_LIMIT
            log.info(f"Fetched {len(questions)} question records for {ga_id}, fetching more...")

        return questions
