"""Transport-agnostic handlers for the read and write-trigger endpoints.

Each handler takes the request method and returns ``(status, headers, body)``
so it can be mounted behind any HTTP server or serverless adapter.
"""
import logging
import sqlite3
from typing import Callable, Dict, Optional, Tuple

from src.config import Config
from src.database import AdvisoryDatabase
from src.errors import ConfigError, FetchError
from src.main import AdvisoryMonitor

logger = logging.getLogger(__name__)

Response = Tuple[int, Dict[str, str], Optional[Dict]]


def _headers(allowed_methods: str) -> Dict[str, str]:
    return {
        'Access-Control-Allow-Origin': '*',
        'Access-Control-Allow-Methods': allowed_methods,
        'Access-Control-Allow-Headers': 'Content-Type',
        'Cache-Control': 'no-store',
    }


def handle_read(config: Config, method: str) -> Response:
    """Return every stored advisory as ``{"advisories": [...]}``."""
    headers = _headers('GET, OPTIONS')
    method = method.upper()

    if method == 'OPTIONS':
        return 200, headers, None
    if method != 'GET':
        return 405, headers, {'message': 'Method Not Allowed'}

    try:
        config.validate()
        db = AdvisoryDatabase(config.DATABASE_PATH)
        documents = db.get_all_advisories()
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 500, headers, {'message': str(e)}
    except sqlite3.Error as e:
        logger.error(f"Error reading advisories: {e}")
        return 500, headers, {'message': str(e)}

    return 200, headers, {'advisories': documents}


def handle_trigger(config: Config, method: str,
                   monitor_factory: Optional[Callable[[Config], AdvisoryMonitor]] = None) -> Response:
    """
    Run one ingestion cycle.

    Individual advisories that fail are logged and skipped; the response
    reports completion regardless. Only a failed fetch (or bad
    configuration) produces a server error.
    """
    headers = _headers('POST, OPTIONS')
    method = method.upper()

    if method == 'OPTIONS':
        return 200, headers, None
    if method != 'POST':
        return 405, headers, {'message': 'Method Not Allowed'}

    factory = monitor_factory or AdvisoryMonitor
    try:
        with factory(config) as monitor:
            monitor.run_once()
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 500, headers, {'message': str(e)}
    except FetchError as e:
        logger.error(f"Error fetching advisories: {e}")
        return 500, headers, {'message': f'Server error: {e}'}
    except sqlite3.Error as e:
        logger.error(f"Error opening advisory store: {e}")
        return 500, headers, {'message': f'Server error: {e}'}

    return 200, headers, {'message': 'Advisories processed'}
