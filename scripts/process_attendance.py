"""Run one processing pass from cron.

    python scripts/process_attendance.py --type morning
    python scripts/process_attendance.py --type evening --date 2024-01-15 --no-notify
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.deduction_engine.deduction_engine.attendance.model import ProcessingRequest
from src.deduction_engine.deduction_engine.common.datetime_utils import today_local
from src.deduction_engine.deduction_engine.common.validators import require_iso_date, require_process_type
from src.deduction_engine.deduction_engine.container import build_container
from src.deduction_engine.deduction_engine.core.exceptions import DomainError
from src.deduction_engine.deduction_engine.main import configure_logging, load_settings


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Process biometric punches into attendance records.")
    parser.add_argument("--type", dest="process_type", choices=["morning", "evening"], default="morning")
    parser.add_argument("--date", dest="target_date", help="YYYY-MM-DD, defaults to today")
    parser.add_argument("--no-notify", dest="send_notifications", action="store_false")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    settings = load_settings()
    configure_logging(settings)

    try:
        request = ProcessingRequest(
            process_type=require_process_type(args.process_type),
            target_date=require_iso_date(args.target_date, default=today_local()),
            send_notifications=args.send_notifications,
        )
        container = build_container(db_config=dict(settings.DB_CONFIG), settings=settings)
        result = container.processing_service.process(request)
    except DomainError as e:
        print(json.dumps({"success": False, "error": str(e)}, ensure_ascii=False))
        return 1

    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
