"""Run the database init scripts once and exit.

Runs regardless of ``init.mode``: invoking the command is the decision.

Usage:
    bin/init-db.py                                  # config/app.yml + DBI_* env vars
    bin/init-db.py --url sqlite+aiosqlite:///tmp/x.db
    bin/init-db.py --continue-on-error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(REPO_ROOT))

from dbinit.bootstrap import DatabaseBootstrapper, block_on
from dbinit.config import AppConfig
from dbinit.database import create_engine
from dbinit.errors import InitError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Initialize the database from SQL scripts")
    parser.add_argument("--config", type=Path, default=None, help="Path to app.yml")
    parser.add_argument("--url", default=None, help="Override the database URL")
    parser.add_argument(
        "--continue-on-error",
        action="store_true",
        help="Log failing statements and keep going",
    )
    args = parser.parse_args(argv)

    config = AppConfig.from_yaml(args.config)
    if args.url:
        config.database.url = args.url
    if args.continue_on_error:
        config.init.continue_on_error = True

    logging.basicConfig(
        level=getattr(logging, config.server.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    engine = create_engine(config.database)
    try:
        DatabaseBootstrapper.from_config(config.init).initialize(engine)
    except InitError as exc:
        print(f"Database initialization failed: {exc}", file=sys.stderr)
        return 1
    finally:
        block_on(engine.dispose)

    print(f"Initialized {engine.url.render_as_string(hide_password=True)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
