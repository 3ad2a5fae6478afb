"""Sync the professional directory from a CSV export.

Usage:
    python -m safeplace.tools.seed_directory
    python -m safeplace.tools.seed_directory --data-dir data
    python -m safeplace.tools.seed_directory --create-schema  # create tables first
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from safeplace.adapters.csv_loader.loader import load_professionals
from safeplace.adapters.persistence.database import Base, async_session_factory, engine
from safeplace.adapters.persistence.models import ProfessionalModel
from safeplace.config import settings

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)


async def sync_professionals(session: AsyncSession, records: list[dict]) -> dict[str, int]:
    """Insert new professionals and update changed ones, keyed by id.

    Professionals missing from the export are left untouched: assignments
    may still reference them, and deactivation is an explicit CSV flag.
    """
    counts = {"created": 0, "updated": 0, "unchanged": 0}
    for rec in records:
        existing = await session.get(ProfessionalModel, rec["id"])
        values = {
            "display_name": rec["display_name"],
            "category": rec["category"].value,
            "email": rec["email"],
            "phone": rec["phone"],
            "is_active": rec["is_active"],
        }
        if existing is None:
            session.add(ProfessionalModel(id=rec["id"], **values))
            counts["created"] += 1
            continue

        if existing.category != values["category"]:
            # Live assignments were made under the old category.
            logger.warning(
                "Professional %s changes category %s → %s",
                rec["id"], existing.category, values["category"],
            )
        changed = False
        for field, value in values.items():
            if getattr(existing, field) != value:
                setattr(existing, field, value)
                changed = True
        counts["updated" if changed else "unchanged"] += 1

    await session.flush()
    return counts


async def seed(
    data_dir: Path,
    create_schema: bool = False,
    session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
) -> dict[str, int]:
    """Main seed function. Returns counts of created/updated/unchanged records."""
    csv_path = _find_csv(data_dir, ["professionals", "directory", "staff", "users"])
    if not csv_path:
        raise FileNotFoundError(
            f"No directory CSV found in {data_dir}. Expected something like professionals.csv"
        )

    if create_schema:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Schema ensured")

    records = load_professionals(csv_path)
    async with session_factory() as session:
        counts = await sync_professionals(session, records)
        await session.commit()

    logger.info(
        "Seed complete: %d created, %d updated, %d unchanged",
        counts["created"], counts["updated"], counts["unchanged"],
    )
    return counts


def _find_csv(data_dir: Path, name_hints: list[str]) -> Path | None:
    """Find a CSV file matching any of the name hints."""
    for f in sorted(data_dir.glob("*.csv")):
        fname_lower = f.stem.lower()
        for hint in name_hints:
            if hint in fname_lower:
                logger.info("Found CSV: %s (matched hint '%s')", f.name, hint)
                return f
    return None


async def _verify_data() -> None:
    """Print per-category directory coverage after seeding."""
    async with async_session_factory() as session:
        result = await session.execute(
            select(ProfessionalModel.category, ProfessionalModel.is_active, func.count())
            .group_by(ProfessionalModel.category, ProfessionalModel.is_active)
        )
        rows = result.all()

    print(f"\n{'='*50}")
    print("DIRECTORY VERIFICATION")
    print(f"{'='*50}")
    for category, is_active, count in sorted(rows):
        print(f"{category:<12} {'active' if is_active else 'inactive':<9} {count}")
    if not rows:
        print("Directory is empty: every allocation will fail")
    print(f"{'='*50}\n")


def main():
    parser = argparse.ArgumentParser(description="Sync the SafePlace professional directory from CSV")
    parser.add_argument(
        "--data-dir", type=str, default=settings.directory_data_path,
        help="Directory containing the CSV export (default: DIRECTORY_DATA_PATH or data)",
    )
    parser.add_argument(
        "--create-schema", action="store_true",
        help="Create missing tables before seeding (development only; use alembic otherwise)",
    )
    parser.add_argument(
        "--verify-only", action="store_true",
        help="Only run verification, don't seed",
    )
    args = parser.parse_args()

    data_dir = Path(args.data_dir)
    if not args.verify_only and not data_dir.exists():
        logger.error("Data directory not found: %s", data_dir)
        sys.exit(1)

    async def run_all():
        if not args.verify_only:
            await seed(data_dir, create_schema=args.create_schema)
        await _verify_data()
        await engine.dispose()

    asyncio.run(run_all())


if __name__ == "__main__":
    main()
