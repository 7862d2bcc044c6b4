"""Example: use the service layer directly (no Flask).

Controllers are a thin layer; the shop rules live in the services.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.print_tracker.print_tracker.container import build_container
from src.print_tracker.print_tracker.database.connection import build_data_access
from src.print_tracker.print_tracker.jobs.calculator.engine import compute_amount


def main():
    settings = importlib.import_module(get_settings_module())
    data = build_data_access(
        backend=settings.DB_BACKEND,
        db_config=settings.DB_CONFIG,
        sqlite_path=settings.SQLITE_PATH,
    )
    container = build_container(data=data, settings=settings)

    print(compute_amount("large_format", {"width_cm": 200, "height_cm": 100}, "50"))
    print(container.report_service.get_daily_summary(date.today()))


if __name__ == "__main__":
    main()
