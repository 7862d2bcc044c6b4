from __future__ import annotations

from _settings import REPO_ROOT, data_access_for, describe, load_settings

from src.print_tracker.print_tracker.database.bootstrap import apply_seed_sql, ensure_demo_users


def main() -> None:
    settings = load_settings()
    data = data_access_for(settings)

    apply_seed_sql(data, seed_path=REPO_ROOT / "database" / "seed.sql")
    ensure_demo_users(data)

    print(f"OK: Seeded database -> {describe(settings)}")


if __name__ == "__main__":
    main()
