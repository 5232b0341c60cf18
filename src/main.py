"""Main application module."""
import logging
import sqlite3
import time
import sys
from dataclasses import dataclass
from typing import Dict, Optional

from src.advisory_client import BaseAdvisoryClient, get_advisory_client
from src.config import Config
from src.database import AdvisoryDatabase
from src.errors import ConfigError, RecordError
from src.filters import filter_relevant
from src.parser import AdvisoryParser

LOG_FORMAT = "%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-20s | %(filename)-15s | %(funcName)-15s | %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(config: Config):
    """Configure root logging from the configured level."""
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S"
    )


@dataclass
class IngestionResult:
    """Counters for one ingestion cycle."""
    fetched: int = 0
    relevant: int = 0
    inserted: int = 0
    updated: int = 0
    failed: int = 0
    windows: int = 0

    @property
    def stored(self) -> int:
        return self.inserted + self.updated


class AdvisoryMonitor:
    """Fetches advisories, keeps the relevant ones and stores them enriched."""

    def __init__(self, config: Config,
                 client: Optional[BaseAdvisoryClient] = None,
                 db: Optional[AdvisoryDatabase] = None):
        """
        Initialize the advisory monitor.

        Raises:
            ConfigError: if the configuration is incomplete
        """
        if config is None:
            raise ConfigError("A configuration is required")
        config.validate()
        self.config = config

        self.db = db or AdvisoryDatabase(config.DATABASE_PATH)
        self._owns_client = client is None
        self.client = client or get_advisory_client(config)
        self.parser = AdvisoryParser()

        logger.info("=" * 80)
        logger.info("Advisory Monitor initialized")
        logger.info(f"Software Version: {self.config.VERSION}")
        logger.info(f"API Endpoint: {self.config.ADVISORY_API_URL}")
        logger.info(f"Database: {self.config.DATABASE_PATH}")
        logger.info(f"Operator keywords: {', '.join(self.config.OPERATOR_KEYWORDS)}")
        logger.info("=" * 80)

    def _ingest_record(self, row: Dict) -> tuple[str, int]:
        """
        Enrich one advisory row and upsert it by advisoryid.

        Returns:
            Tuple of (store action, window count)

        Raises:
            RecordError: if enrichment or storage fails
        """
        advisory_id = row.get('advisoryid') if isinstance(row, dict) else None
        try:
            enriched = self.parser.parse_advisory(row)
            action = self.db.upsert_advisory(enriched.to_document())
        except RecordError:
            raise
        except sqlite3.Error as e:
            raise RecordError(advisory_id, f"Store error for advisory {advisory_id}: {e}") from e
        except Exception as e:
            raise RecordError(advisory_id, f"Error processing advisory {advisory_id}: {e}") from e

        return action, len(enriched.parsed_details)

    def process_advisories(self) -> IngestionResult:
        """
        Fetch and process advisories.

        Returns:
            IngestionResult with per-cycle counters

        Raises:
            FetchError: if the upstream batch could not be fetched
        """
        result = IngestionResult()

        logger.info("Fetching advisories from API...")
        rows = self.client.fetch_advisories()
        result.fetched = len(rows)

        relevant = filter_relevant(rows, self.config.OPERATOR_KEYWORDS)
        result.relevant = len(relevant)
        logger.info(f"Retrieved {result.fetched} advisory row(s), {result.relevant} relevant")

        for row in relevant:
            try:
                action, window_count = self._ingest_record(row)
            except RecordError as e:
                result.failed += 1
                logger.error(f"Skipping advisory {e.advisory_id}: {e}")
                continue

            result.windows += window_count
            if action == "inserted":
                result.inserted += 1
                logger.info(f"Inserted advisory {row['advisoryid']} ({window_count} window(s))")
            else:
                result.updated += 1
                logger.info(f"Updated advisory {row['advisoryid']} ({window_count} window(s))")

        logger.info(
            f"Processing complete: {result.inserted} inserted, {result.updated} updated, "
            f"{result.failed} failed, {result.windows} window(s) parsed"
        )
        return result

    def run_once(self) -> IngestionResult:
        """Run a single update cycle."""
        logger.info("=" * 80)
        logger.info("Starting advisory update cycle")
        logger.info("=" * 80)

        start_time = time.time()
        result = self.process_advisories()
        elapsed = time.time() - start_time

        # Display statistics
        stats = self.db.get_statistics()
        logger.info("=" * 80)
        logger.info("Database Statistics:")
        logger.info(f"  Total advisories in DB: {stats['total_advisories']}")
        logger.info(f"  Advisories with windows: {stats['advisories_with_windows']}")
        logger.info(f"  Total windows: {stats['total_windows']}")
        logger.info(f"  Cycle time: {elapsed:.2f}s")
        logger.info("=" * 80)
        logger.info("Update cycle complete")
        logger.info("=" * 80)

        return result

    def run_continuous(self):
        """Run continuous monitoring with periodic updates."""
        logger.info("Starting continuous monitoring mode")
        logger.info(f"Update interval: {self.config.UPDATE_INTERVAL_SECONDS}s")

        try:
            while True:
                try:
                    self.run_once()
                except Exception as e:
                    logger.error(f"Update cycle failed: {e}", exc_info=True)
                logger.info(f"Next update in {self.config.UPDATE_INTERVAL_SECONDS}s...")
                time.sleep(self.config.UPDATE_INTERVAL_SECONDS)

        except KeyboardInterrupt:
            logger.info("Monitoring stopped by user")

    def close(self):
        """Release the HTTP session if this monitor created it."""
        if self._owns_client:
            self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


def main():
    """Main entry point."""
    # Check if we should run once or continuously
    run_once = '--once' in sys.argv

    try:
        config = Config.from_env()
        configure_logging(config)
        if run_once:
            # handlers imports this module
            from src.handlers import handle_trigger

            status, _, body = handle_trigger(config, 'POST')
            logger.info(body['message'])
            if status != 200:
                sys.exit(1)
        else:
            with AdvisoryMonitor(config) as monitor:
                monitor.run_continuous()
    except Exception as e:
        logger.error(f"Advisory monitor failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
