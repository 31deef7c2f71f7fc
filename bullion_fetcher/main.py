"""Entry point and scheduler for the bullion price fetcher."""

import logging
import random
import sys
import time
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parents[1] / ".env")

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from bullion_fetcher import config
from bullion_fetcher.cache import PriceCache
from bullion_fetcher.fetchers.relay import RelayFetcher
from bullion_fetcher.models import FetchResult, UNAVAILABLE
from bullion_fetcher.orchestrator import BatchOrchestrator
from bullion_fetcher.publisher import write_results_json
from bullion_fetcher.storage import SqliteStore

logger = logging.getLogger(__name__)


def build_orchestrator() -> BatchOrchestrator:
    """Wire store, cache and fetcher from the environment."""
    cache = PriceCache(
        SqliteStore(config.get_db_path()),
        key=config.get_cache_key(),
        fresh_seconds=config.get_fresh_seconds(),
        expiry_seconds=config.get_expiry_seconds(),
    )
    return BatchOrchestrator(cache, fetcher=RelayFetcher.from_env())


def run_check(orchestrator: BatchOrchestrator | None = None) -> list[FetchResult]:
    """Price every default source once, log the outcome and publish it."""
    orchestrator = orchestrator or build_orchestrator()
    results = orchestrator.fetch_all(delay_ms=config.get_delay_ms())

    for r in results:
        if r.price == UNAVAILABLE:
            logger.warning("%-12s %s (%s)", r.name, r.price, r.error or "no price on page")
        else:
            logger.info("%-12s %s%s", r.name, r.price, " [cached]" if r.cached else "")

    results_path = config.get_results_path()
    if results_path is not None:
        write_results_json(orchestrator.last_results, results_path)
    return results


def run_check_with_jitter(orchestrator: BatchOrchestrator) -> None:
    """Sleep a random 0..JITTER_MAX_SECONDS before a scheduled check."""
    delay = random.uniform(0, config.get_jitter_max_seconds())
    logger.debug("Jitter: sleeping %.1f s before check", delay)
    time.sleep(delay)
    run_check(orchestrator)


def main() -> None:
    """Run once immediately, then keep refreshing on an interval if configured."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    orchestrator = build_orchestrator()
    logger.info("Bullion fetcher started (store: %s)", config.get_db_path())
    run_check(orchestrator)

    interval_minutes = config.get_refresh_interval_minutes()
    if interval_minutes <= 0:
        return

    logger.info(
        "Scheduler: every ~%d min ± %d s jitter",
        interval_minutes, config.get_jitter_max_seconds(),
    )
    scheduler = BlockingScheduler()
    scheduler.add_job(
        run_check_with_jitter,
        trigger=IntervalTrigger(minutes=interval_minutes),
        args=[orchestrator],
        id="price_refresh",
        max_instances=1,
        misfire_grace_time=300,
    )
    scheduler.start()


if __name__ == "__main__":
    main()
