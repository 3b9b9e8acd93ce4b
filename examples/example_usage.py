"""Example: drive the service layer directly (no Flask).

Controllers stay thin; the processing and notification logic lives in services.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.deduction_engine.deduction_engine.attendance.model import ProcessingRequest
from src.deduction_engine.deduction_engine.container import build_container
from src.deduction_engine.deduction_engine.core.actor import Actor
from src.deduction_engine.deduction_engine.core.enums import ProcessType


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)

    request = ProcessingRequest(process_type=ProcessType.EVENING, target_date=date.today(), send_notifications=False)
    result = container.processing_service.process(request, Actor.user("hr-reviewer"))
    for row in result.results:
        print(row.to_dict())

    print(container.deduction_notification_service.notify_pending().to_dict())


if __name__ == "__main__":
    main()
