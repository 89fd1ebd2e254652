import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger("dashboard")

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


def sqlite_path(db_url: str) -> Path:
    prefix = "sqlite:///"
    if not db_url.startswith(prefix):
        raise ValueError(f"Unsupported database URL '{db_url}': expected sqlite:///")

    raw_path = db_url.removeprefix(prefix)
    if raw_path in ("", ":memory:"):
        raise ValueError("The rollup store needs a file-backed SQLite database")

    path = Path(raw_path)
    return path if path.is_absolute() else Path.cwd() / path


def migration_versions() -> list[str]:
    return [path.stem for path in sorted(MIGRATIONS_DIR.glob("*.sql"))]


def apply_migrations(db_url: str) -> list[str]:
    """Apply pending ``migrations/*.sql`` files in name order.

    Returns the versions applied by this call; already recorded versions in
    ``schema_migrations`` are skipped.
    """

    db_path = sqlite_path(db_url)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    applied: list[str] = []
    with sqlite3.connect(db_path) as connection:
        connection.execute(
            "CREATE TABLE IF NOT EXISTS schema_migrations ("
            "version TEXT PRIMARY KEY, "
            "applied_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP)"
        )
        recorded = {
            row[0]
            for row in connection.execute("SELECT version FROM schema_migrations")
        }

        for version in migration_versions():
            if version in recorded:
                continue
            script = (MIGRATIONS_DIR / f"{version}.sql").read_text(encoding="utf-8")
            connection.executescript(script)
            connection.execute(
                "INSERT INTO schema_migrations(version) VALUES (?)", (version,)
            )
            applied.append(version)

        connection.commit()

    if applied:
        logger.info(
            "migrations_applied", extra={"db_path": str(db_path), "versions": applied}
        )
    return applied
