"""
GA Sync Job
Pulls yesterday's GA summary and question stats for every configured account
and persists them, retrying the whole pass on failure.
"""
import threading
import time
from datetime import datetime
from typing import Callable, Dict, Optional

from sidestats.connectors.base_connector import AnalyticsClient
from sidestats.repositories.ga_stats_repository import GaStatsRepository
from sidestats.utils.helpers import previous_day_window, truncate_to_day, utc_now
from sidestats.utils.logger import log
from sidestats.utils.retry import RetryStats, calculate_backoff

SYNC_SOURCE = "ga"


class GaSyncJob:
    """
    Periodic multi-account GA sync with bounded retry.

    A pass walks the accounts in configuration order and aborts on the
    first error; the whole pass is then retried, at most max_retry more
    times. run_update_ga never raises: the outcome goes to the logs and to
    the data_sync_status table.
    """

    def __init__(
        self,
        ga_client: AnalyticsClient,
        repository: GaStatsRepository,
        accounts: Dict[str, str],
        max_retry: int = 5,
        retry_base_delay: float = 2.0,
        retry_max_delay: float = 60.0,
        skip_synced: bool = False,
        clock: Callable[[], datetime] = utc_now,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.ga_client = ga_client
        self.repository = repository
        self.accounts = dict(accounts)
        self.max_retry = max_retry
        self.retry_base_delay = retry_base_delay
        self.retry_max_delay = retry_max_delay
        self.skip_synced = skip_synced
        self.clock = clock
        self.sleep = sleep
        self.last_run: Optional[RetryStats] = None
        self._running = threading.Lock()

    def run_update_ga(self) -> None:
        """Run one sync invocation (scheduler and API entry point)"""
        if not self._running.acquire(blocking=False):
            log.warning("GA sync already running, skipping this trigger")
            return
        try:
            self._run_with_retry()
        finally:
            self._running.release()

    def _run_with_retry(self) -> None:
        # Captured once so slow fetches or retries can't move the stamped date
        sync_date = truncate_to_day(self.clock())
        stats = RetryStats()
        self.last_run = stats
        retry = 0

        log.info(f"Starting GA sync for {sync_date.date()} ({len(self.accounts)} accounts)")

        while True:
            try:
                self._try_run_update_ga(sync_date)
            except Exception as e:
                stats.record_attempt(error=e)
                retry += 1
                log.error(f"Ga stats failed: {e} (retry {retry}/{self.max_retry})")

                if retry > self.max_retry:
                    log.error(
                        f"Ga stats gave up for {sync_date.date()} after {stats.attempts} attempts: "
                        f"{stats.last_error}"
                    )
                    log.error(f"GA sync retry stats: {stats.to_dict()}")
                    break

                delay = calculate_backoff(
                    retry,
                    base_delay=self.retry_base_delay,
                    max_delay=self.retry_max_delay
                )
                if delay > 0:
                    stats.add_delay(delay)
                    log.warning(f"Retrying GA sync in {delay:.1f}s...")
                    self.sleep(delay)
                continue

            stats.record_attempt()
            stats.mark_success()
            if retry > 0:
                log.info(
                    f"Ga stats succeeded after {stats.retries} retries "
                    f"after {stats.total_delay_seconds:.1f}s total delay"
                )
            else:
                log.info(f"Ga stats synced for {sync_date.date()}")
            break

        self._record_outcome(stats)

    def _try_run_update_ga(self, sync_date: datetime) -> None:
        """One pass over all accounts; the first error aborts the pass"""
        start, end = previous_day_window(sync_date)
        stamp = sync_date.date()

        for account_key, ga_id in self.accounts.items():
            log.info(f"Updating {account_key} (gaId={ga_id})")

            if self.skip_synced and self.repository.has_summary(ga_id, stamp):
                log.info(f"Update early, skipping {account_key} (gaId={ga_id})")
                continue

            summary = self.ga_client.get_summary_data(ga_id, start, end)
            summary.timestamp = stamp
            log.info(f"Summary received (gaId={ga_id})")

            questions = self.ga_client.get_entity_breakdown(ga_id, start, end)
            log.info(f"Questions received (gaId={ga_id}, count={len(questions)})")

            question_ids = []
            for question_id, stat in questions.items():
                stat.timestamp = stamp
                question_ids.append(question_id)

            self.repository.save(account_key, ga_id, stamp, summary, questions)
            log.info(f"Ga stats saved (gaId={ga_id}, questions={len(question_ids)})")

    def _record_outcome(self, stats: RetryStats) -> None:
        try:
            self.repository.record_sync_status(
                SYNC_SOURCE,
                success=stats.success,
                attempts=stats.attempts,
                retry_delay_seconds=stats.total_delay_seconds,
                errors=stats.errors,
            )
        except Exception as e:
            log.error(f"Failed to record GA sync status: {e}")
