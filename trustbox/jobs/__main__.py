"""Run the catalog ranking job from the command line.

Usage::

    python -m trustbox.jobs catalog.json --limit 20 --age 7
    python -m trustbox.jobs catalog.json --quiet
"""

import argparse
import sys

from trustbox.config import config
from trustbox.jobs.rank_catalog import run_rank_catalog
from trustbox.logging import CATALOG_LOGGERS, get_logger, setup_logging

logger = get_logger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="trustbox.jobs",
        description="Rank a catalog snapshot by trust score",
    )
    parser.add_argument("path", nargs="?", help="Catalog snapshot (default: CATALOG_PATH)")
    parser.add_argument("--limit", "-l", type=int, help="Entries to show")
    parser.add_argument("--age", "-a", type=int, help="Target user age")
    parser.add_argument("--strict", action="store_true", help="Strict safety gate")
    parser.add_argument(
        "--quiet", "-q", action="store_true", help="Hide skipped-row warnings"
    )
    args = parser.parse_args(argv)

    setup_logging(config.log_level, quiet=CATALOG_LOGGERS if args.quiet else ())

    try:
        run_rank_catalog(
            path=args.path,
            limit=args.limit,
            user_age=args.age,
            strict=args.strict or None,
        )
    except ValueError as e:
        logger.error(str(e))
        return 1
    except Exception:
        logger.exception("rank_catalog failed")
        raise

    return 0


if __name__ == "__main__":
    sys.exit(main())
