#!/usr/bin/env python3
"""Database inspection CLI."""
import argparse
import json
import sys
import logging
from src.database import AdvisoryDatabase
from src.config import Config
from src.errors import ConfigError
from src.handlers import handle_read

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-20s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description='Advisory database inspection')
    parser.add_argument('--list', action='store_true',
                       help='Print every stored advisory as JSON')
    parser.add_argument('--show', type=int, metavar='ID',
                       help='Print the stored advisory with this advisoryid')
    parser.add_argument('--stats', action='store_true',
                       help='Print summary statistics')

    args = parser.parse_args(argv)

    try:
        config = Config.from_env()
        config.validate()
    except ConfigError as e:
        logger.error(str(e))
        return 1

    db = AdvisoryDatabase(config.DATABASE_PATH)

    if args.list:
        status, _, body = handle_read(config, 'GET')
        if status != 200:
            logger.error(body['message'])
            return 1
        print(json.dumps(body, indent=2))

    if args.show is not None:
        document = db.get_advisory(args.show)
        if document is None:
            logger.error(f"Advisory {args.show} not found")
            return 1
        print(json.dumps(document, indent=2))

    if args.stats:
        stats = db.get_statistics()
        logger.info(
            f"Advisories: {stats['total_advisories']} "
            f"({stats['advisories_with_windows']} with windows, "
            f"{stats['total_windows']} windows)"
        )

    return 0


if __name__ == '__main__':
    sys.exit(main())
