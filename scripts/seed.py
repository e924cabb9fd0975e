"""
Seed the configured store with the demo event line-up.

    STORAGE_BACKEND=sql python scripts/seed.py --reset
"""

from __future__ import annotations

import argparse
import logging

from noravenolife.core.config import settings
from noravenolife.core.db import Base, SessionLocal, engine
from noravenolife.services.event_service import EventService
from noravenolife.services.repositories import use_sql

logger = logging.getLogger("seed")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed NoRaveNoLife events")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate SQL tables before seeding")
    return parser.parse_args()


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    args = parse_args()
    logger.info(f"Start seeding {settings.STORAGE_BACKEND} store ...")

    if use_sql():
        if args.reset:
            Base.metadata.drop_all(bind=engine)
        Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        created = EventService.seed_events(db)
    finally:
        db.close()

    logger.info(f"Seeding finished. {created} events created.")


if __name__ == "__main__":
    main()
