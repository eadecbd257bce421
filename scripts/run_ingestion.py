#!/usr/bin/env python3
"""Run one ingestion source synchronously, for debugging extractors.

Records an IngestionRun like the API does, but executes it in-process
instead of on a Celery worker, and without the wall-clock limit.

    python scripts/run_ingestion.py anthropic
    python scripts/run_ingestion.py deepmind-research --no-enrich
    python scripts/run_ingestion.py --list
"""

import argparse
import logging
import sys
from pathlib import Path

# Add backend to path when running as script
backend_dir = Path(__file__).resolve().parent.parent / "backend"
if backend_dir.exists():
    sys.path.insert(0, str(backend_dir))

from research_hub.extractors.sources import get_source, list_sources
from research_hub.models import Base, IngestionRun
from research_hub.models.base import open_sync_session
from research_hub.services.ingestion_service import execute_run


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("source", nargs="?", help="source key, see --list")
    parser.add_argument("--list", action="store_true", help="list configured sources and exit")
    parser.add_argument("--no-enrich", action="store_true", help="skip LLM enrichment")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list or not args.source:
        for source in list_sources():
            print(f"{source.key:22} {source.kind:7} {source.platform:15} {source.url}")
        return 0

    source = get_source(args.source)
    if source is None:
        print(f"Unknown source: {args.source}", file=sys.stderr)
        return 2

    db = open_sync_session()
    try:
        Base.metadata.create_all(db.get_bind())
        run = IngestionRun(source=source.key, kind=source.kind, status="queued", requested_by="cli")
        db.add(run)
        db.commit()

        run = execute_run(db, run.id, enrich=not args.no_enrich)
        print(
            f"{source.key}: {run.status} "
            f"(found={run.items_found} new={run.items_new} updated={run.items_updated})"
        )
        if run.error_message:
            print(f"  {run.error_message}")
        return 0 if run.status == "success" else 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
