"""Run one daily dispatch sweep from the command line (e.g. from an hourly cron)."""
import argparse
import json
import sys

from stylist.config import settings
from stylist.services import build_services
from utils.logging_utils import get_tagged_logger, setup_logging

logger = get_tagged_logger(__name__, tag="sweep")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Send the morning email to users whose local hour matches.")
    parser.add_argument("--hour", type=int, default=settings.dispatch_hour,
                        help="local hour of day to match (0-23)")
    args = parser.parse_args(argv)
    if not 0 <= args.hour <= 23:
        parser.error("--hour must be between 0 and 23")

    setup_logging(level=settings.log_level, job_name="daily_sweep")
    services = build_services(settings)
    try:
        result = services.sweep.sweep(args.hour)
    except Exception:
        logger.exception("Daily sweep failed")
        return 1

    print(json.dumps(result.as_payload()))
    return 0 if result.errors == 0 else 2


if __name__ == "__main__":
    sys.exit(main())
