"""
GA4 connector parsing tests against a stubbed Data API client.
"""
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from sidestats.connectors.ga4_connector import GA4Connector
from sidestats.errors import ConfigurationError, ProviderError

SYNC_DATE = datetime(2026, 10, 17, tzinfo=timezone.utc)
WINDOW_START = datetime(2026, 10, 16, tzinfo=timezone.utc)


def row(dimensions, metrics):
    return SimpleNamespace(
        dimension_values=[SimpleNamespace(value=d) for d in dimensions],
        metric_values=[SimpleNamespace(value=str(m)) for m in metrics],
    )


class StubDataClient:
    """Returns queued responses and keeps the requests it received"""

    def __init__(self, responses=None, error=None):
        self.responses = list(responses or [])
        self.error = error
        self.requests = []

    def _next(self, request):
        self.requests.append(request)
        if self.error:
            raise self.error
        return self.responses.pop(0)

    def run_report(self, request, timeout=None):
        return self._next(request)

    def run_realtime_report(self, request, timeout=None):
        return self._next(request)


def test_summary_parses_single_totals_row():
    client = StubDataClient([SimpleNamespace(rows=[row([], [100, 40, 120, 300, 90, 0.25, 61.5, 900])])])
    connector = GA4Connector(client=client)

    summary = connector.get_summary_data("123", WINDOW_START, SYNC_DATE)

    assert summary.active_users == 100
    assert summary.new_users == 40
    assert summary.sessions == 120
    assert summary.pageviews == 300
    assert summary.engaged_sessions == 90
    assert summary.bounce_rate == pytest.approx(0.25)
    assert summary.avg_session_duration == pytest.approx(61.5)
    assert summary.event_count == 900
    assert summary.timestamp is None


def test_half_open_window_becomes_inclusive_ga_range():
    client = StubDataClient([SimpleNamespace(rows=[])])
    connector = GA4Connector(client=client)

    connector.get_summary_data("123", WINDOW_START, SYNC_DATE)

    request = client.requests[0]
    assert request.property == "properties/123"
    assert request.date_ranges[0].start_date == "2026-10-16"
    assert request.date_ranges[0].end_date == "2026-10-16"


def test_summary_without_rows_is_empty():
    connector = GA4Connector(client=StubDataClient([SimpleNamespace(rows=[])]))

    summary = connector.get_summary_data("123", WINDOW_START, SYNC_DATE)

    assert summary.active_users == 0
    assert summary.pageviews == 0


def test_breakdown_merges_paths_of_the_same_question():
    client = StubDataClient([SimpleNamespace(rows=[
        row(["/questions/101"], [10, 4, 30.0]),
        row(["/questions/101/answers"], [5, 2, 12.5]),
        row(["/questions/102?utm_source=x"], [7, 3, 8.0]),
        row(["/questions/new"], [99, 99, 99.0]),
    ])])
    connector = GA4Connector(client=client)

    questions = connector.get_entity_breakdown("123", WINDOW_START, SYNC_DATE)

    assert sorted(questions) == [101, 102]
    assert questions[101].pageviews == 15
    assert questions[101].users == 6
    assert questions[101].engagement_seconds == pytest.approx(42.5)
    assert questions[101].paths == ["/questions/101", "/questions/101/answers"]
    assert questions[102].pageviews == 7


def test_breakdown_pages_through_results():
    first = SimpleNamespace(rows=[row(["/questions/1"], [1, 1, 1.0]), row(["/questions/2"], [2, 1, 1.0])])
    second = SimpleNamespace(rows=[row(["/questions/3"], [3, 1, 1.0])])
    client = StubDataClient([first, second])
    connector = GA4Connector(client=client)
    connector.PAGE_LIMIT = 2

    questions = connector.get_entity_breakdown("123", WINDOW_START, SYNC_DATE)

    assert sorted(questions) == [1, 2, 3]
    assert [r.offset for r in client.requests] == [0, 2]


def test_realtime_reads_active_users():
    client = StubDataClient([SimpleNamespace(rows=[row([], [17])])])

    assert GA4Connector(client=client).get_realtime("123") == 17


def test_realtime_without_rows_is_zero():
    client = StubDataClient([SimpleNamespace(rows=[])])

    assert GA4Connector(client=client).get_realtime("123") == 0


def test_client_errors_become_provider_errors():
    connector = GA4Connector(client=StubDataClient(error=RuntimeError("quota exceeded")))

    with pytest.raises(ProviderError) as exc:
        connector.get_summary_data("123", WINDOW_START, SYNC_DATE)

    assert "quota exceeded" in str(exc.value)
    assert connector.error_count == 1


def test_malformed_metric_value_is_a_provider_error():
    client = StubDataClient([SimpleNamespace(rows=[row(["/questions/5"], ["n/a", 1, 1.0])])])

    with pytest.raises(ProviderError):
        GA4Connector(client=client).get_entity_breakdown("123", WINDOW_START, SYNC_DATE)


def test_missing_key_file_is_a_configuration_error():
    connector = GA4Connector(key_file=None)

    with pytest.raises(ConfigurationError):
        connector.get_realtime("123")
    assert connector.validate_connection() is False
