from __future__ import annotations

from _settings import REPO_ROOT, data_access_for, describe, load_settings

from src.print_tracker.print_tracker.database.bootstrap import (
    apply_schema,
    ensure_database_exists,
    list_tables,
    schema_path_for,
)


def main() -> None:
    settings = load_settings()
    if settings.DB_BACKEND == "mysql":
        ensure_database_exists(dict(settings.DB_CONFIG))

    data = data_access_for(settings)
    schema_path = schema_path_for(REPO_ROOT / "database", data.dialect)
    apply_schema(data, schema_path=schema_path)
    tables = list_tables(data)
    print(f"OK: Applied {schema_path.name} -> {describe(settings)} (tables={len(tables)})")


if __name__ == "__main__":
    main()
