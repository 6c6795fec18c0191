"""Minimal SQL migration runner for the users schema.

usage: python -m account_service.infrastructure.db.migrate [up|status|new <name>]
"""
from __future__ import annotations

import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import psycopg

from account_service.settings import get_settings

DEFAULT_MIGRATIONS_DIR = Path(__file__).resolve().parents[3] / "migrations"
SCHEMA_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS schema_migrations (
  version    text PRIMARY KEY,
  applied_at timestamptz NOT NULL DEFAULT now()
);
"""


def migrations_dir() -> Path:
    return Path(os.environ.get("MIGRATIONS_DIR", DEFAULT_MIGRATIONS_DIR))


def list_migrations(directory: Path) -> list[Path]:
    if not directory.exists():
        raise FileNotFoundError(f"migrations dir not found: {directory}")
    return sorted(directory.glob("*.sql"))


def applied_versions(conn: psycopg.Connection) -> set[str]:
    with conn.cursor() as cur:
        cur.execute(SCHEMA_TABLE_SQL)
        cur.execute("SELECT version FROM schema_migrations ORDER BY version;")
        rows = cur.fetchall()
    return {r[0] for r in rows}


def pending(paths: list[Path], done: set[str]) -> list[Path]:
    return [p for p in paths if p.stem not in done]


def apply_one(conn: psycopg.Connection, path: Path) -> None:
    version = path.stem
    print(f"==> applying {version}", flush=True)
    with conn.cursor() as cur:
        cur.execute(path.read_text(encoding="utf-8"))
        cur.execute(
            "INSERT INTO schema_migrations (version, applied_at) VALUES (%s, now());",
            (version,),
        )
    conn.commit()
    print(f"applied {version}", flush=True)


def cmd_up(directory: Path) -> int:
    paths = list_migrations(directory)
    with psycopg.connect(get_settings().database_url, autocommit=False) as conn:
        to_run = pending(paths, applied_versions(conn))
        if not to_run:
            print("No pending migrations.")
            return 0
        for path in to_run:
            try:
                apply_one(conn, path)
            except psycopg.Error as e:
                conn.rollback()
                print(f"failed {path.stem}: {e}", file=sys.stderr)
                return 1
    return 0


def cmd_status(directory: Path) -> int:
    paths = list_migrations(directory)
    with psycopg.connect(get_settings().database_url) as conn:
        done = applied_versions(conn)
    print("=== Applied ===")
    for v in sorted(done):
        print(v)
    print("=== Pending ===")
    for path in pending(paths, done):
        print(path.stem)
    return 0


def cmd_new(directory: Path, name: str) -> Path:
    ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M")
    path = directory / f"{ts}_{name}.sql"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("-- write your SQL here\n", encoding="utf-8")
    return path


def main(argv: list[str]) -> int:
    if len(argv) < 2:
        print(__doc__.strip().splitlines()[-1], file=sys.stderr)
        return 2
    directory = migrations_dir()
    cmd = argv[1]
    try:
        if cmd == "up":
            return cmd_up(directory)
        if cmd == "status":
            return cmd_status(directory)
        if cmd == "new":
            if len(argv) < 3:
                print("usage: ... new <name>", file=sys.stderr)
                return 2
            print(str(cmd_new(directory, argv[2])))
            return 0
    except FileNotFoundError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    print(f"unknown command: {cmd}", file=sys.stderr)
    return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
