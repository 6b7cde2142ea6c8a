from __future__ import annotations

import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import psycopg
from pydantic import ValidationError

from clubhouse.infrastructure.db.pool import build_conninfo
from clubhouse.settings import get_settings

MIGRATIONS_DIR = Path(os.environ.get("MIGRATIONS_DIR", "migrations"))
SCHEMA_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS schema_migrations (
  version    text PRIMARY KEY,
  applied_at timestamptz NOT NULL DEFAULT now()
);
"""


def log(msg: str) -> None:
    print(msg, flush=True)


def conninfo() -> str:
    try:
        return build_conninfo(get_settings())
    except ValidationError as e:
        print(f"ERROR: incomplete configuration: {e}", file=sys.stderr)
        raise SystemExit(2)


def list_migrations() -> list[Path]:
    if not MIGRATIONS_DIR.exists():
        print(f"ERROR: migrations dir not found: {MIGRATIONS_DIR}", file=sys.stderr)
        raise SystemExit(2)
    return sorted(MIGRATIONS_DIR.glob("*.sql"))


def applied_versions(conn: psycopg.Connection) -> set[str]:
    with conn.cursor() as cur:
        cur.execute(SCHEMA_TABLE_SQL)
        cur.execute("SELECT version FROM schema_migrations ORDER BY version;")
        rows = cur.fetchall()
    return {r[0] for r in rows}


def pending(all_paths: list[Path], done: set[str]) -> list[Path]:
    return [p for p in all_paths if p.stem not in done]


def apply_one(conn: psycopg.Connection, path: Path) -> None:
    version = path.stem
    log(f"==> applying {version}")
    with conn.cursor() as cur:
        cur.execute(path.read_text(encoding="utf-8"))
        cur.execute(
            "INSERT INTO schema_migrations (version, applied_at) VALUES (%s, now());",
            (version,),
        )
    conn.commit()
    log(f"applied {version}")


def cmd_up() -> int:
    with psycopg.connect(conninfo(), autocommit=False) as conn:
        to_run = pending(list_migrations(), applied_versions(conn))
        if not to_run:
            log("No pending migrations.")
            return 0
        for path in to_run:
            try:
                apply_one(conn, path)
            except psycopg.Error as e:
                conn.rollback()
                print(f"failed {path.stem}: {e}", file=sys.stderr)
                return 1
    return 0


def cmd_status() -> int:
    with psycopg.connect(conninfo()) as conn, conn.cursor() as cur:
        cur.execute(SCHEMA_TABLE_SQL)
        cur.execute(
            "SELECT version, applied_at FROM schema_migrations ORDER BY version;"
        )
        rows = cur.fetchall()
    print("=== Applied ===")
    seen = set()
    for version, at in rows:
        seen.add(version)
        print(f"{version} @ {at.isoformat() if isinstance(at, datetime) else at}")
    print("=== Pending ===")
    for path in pending(list_migrations(), seen):
        print(path.stem)
    return 0


def cmd_new(name: str) -> int:
    ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M")
    path = MIGRATIONS_DIR / f"{ts}_{name}.sql"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("-- write your SQL here\n", encoding="utf-8")
    print(str(path))
    return 0


def main(argv: list[str]) -> int:
    usage = "usage: python -m clubhouse.infrastructure.db.migrate [up|status|new <name>]"
    if len(argv) < 2:
        print(usage, file=sys.stderr)
        return 2
    cmd = argv[1]
    if cmd == "up":
        return cmd_up()
    if cmd == "status":
        return cmd_status()
    if cmd == "new":
        if len(argv) < 3:
            print(usage, file=sys.stderr)
            return 2
        return cmd_new(argv[2])
    print(f"unknown command: {cmd}", file=sys.stderr)
    return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
