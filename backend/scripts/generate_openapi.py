"""
Write the OpenAPI document of the evaluation service.

Run with:
  python backend/scripts/generate_openapi.py [--output docs/openapi.json]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

backend_root = Path(__file__).resolve().parents[1]
project_root = backend_root.parent
sys.path.append(str(backend_root))

from evalservice.core.logging import configure_logging
from evalservice.main import app

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Dump the OpenAPI document")
    parser.add_argument("--output", type=Path, default=project_root / "docs" / "openapi.json")
    args = parser.parse_args(argv)

    configure_logging()
    openapi = app.openapi()
    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_text(json.dumps(openapi, ensure_ascii=False, indent=2), encoding="utf-8")
    logger.info("Wrote %d paths to %s", len(openapi.get("paths", {})), args.output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
