"""
Repair subject/course back-references left inconsistent by interrupted writes.

Run with:
  python backend/scripts/sweep_backrefs.py --dry-run
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

backend_root = Path(__file__).resolve().parents[1]
sys.path.append(str(backend_root))

from evalservice.core.db import SessionLocal
from evalservice.core.logging import configure_logging
from evalservice.services.backref_service import backref_service

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--dry-run", action="store_true", help="report without writing")
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    db = SessionLocal()
    try:
        report = backref_service.sweep(db, dry_run=args.dry_run)
    finally:
        db.close()

    for name, ids in vars(report).items():
        for record_id in ids:
            logger.info("%s: %s", name, record_id)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
