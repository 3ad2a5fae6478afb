"""Health check endpoint — database reachability and directory coverage."""

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from safeplace.adapters.persistence.database import get_session
from safeplace.adapters.persistence.models import ProfessionalModel
from safeplace.domain.value_objects.enums import ProfessionalCategory

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(session: AsyncSession = Depends(get_session)):
    """Report database status and how many active professionals each category has.

    A category with zero professionals means allocations for it will fail
    with NoProfessionalsAvailable, so it is reported as degraded.
    """
    coverage = {c.value: 0 for c in ProfessionalCategory}
    try:
        result = await session.execute(
            select(ProfessionalModel.category, func.count())
            .where(ProfessionalModel.is_active.is_(True))
            .group_by(ProfessionalModel.category)
        )
        for category, count in result.all():
            coverage[category] = count
        db_status = "connected"
    except (SQLAlchemyError, OSError) as e:
        db_status = f"error: {e}"

    healthy = db_status == "connected" and all(coverage.values())
    return {
        "status": "ok" if healthy else "degraded",
        "database": db_status,
        "professionals": coverage,
        "service": "SafePlace - victim/professional routing",
    }
