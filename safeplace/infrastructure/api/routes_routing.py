"""Routing endpoints — classify, allocate, transfer, and assignment views."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from safeplace.adapters.persistence.database import get_session
from safeplace.adapters.persistence.repositories import commit_unit_of_work
from safeplace.application.use_cases.allocate_professional import AllocateProfessionalUseCase
from safeplace.application.use_cases.case_queries import (
    ListProfessionalCaseloadUseCase,
    ListVictimAssignmentsUseCase,
    MarkContactedUseCase,
    TransferHistoryUseCase,
)
from safeplace.application.use_cases.classify_situation import ClassifySituationUseCase
from safeplace.application.use_cases.transfer_case import TransferCaseUseCase
from safeplace.domain.entities.caller import Caller
from safeplace.domain.entities.professional import Professional
from safeplace.domain.errors import RoutingError
from safeplace.infrastructure.api.dependencies import (
    get_allocate_uc,
    get_caseload_uc,
    get_classify_uc,
    get_mark_contacted_uc,
    get_transfer_history_uc,
    get_transfer_uc,
    get_victim_assignments_uc,
)
from safeplace.infrastructure.api.errors import to_http_exception
from safeplace.infrastructure.api.identity import get_caller
from safeplace.infrastructure.api.schemas import (
    AllocateRequest,
    ClassifyRequest,
    TransferRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/routing", tags=["routing"])


@router.post("/classify")
async def classify_situation(
    body: ClassifyRequest,
    caller: Caller = Depends(get_caller),
    uc: ClassifySituationUseCase = Depends(get_classify_uc),
):
    """Recommend counsellor or legal support for a situation description."""
    try:
        result = uc.execute(body.text)
    except RoutingError as e:
        raise to_http_exception(e) from e

    return {
        "recommended_category": result.recommended_category.value,
        "rationale": result.rationale,
        "score_breakdown": result.score_breakdown,
        "matched_keywords": result.matched_keywords,
    }


@router.post("/allocate")
async def allocate_professional(
    body: AllocateRequest,
    caller: Caller = Depends(get_caller),
    uc: AllocateProfessionalUseCase = Depends(get_allocate_uc),
    session: AsyncSession = Depends(get_session),
):
    """Return the caller's professional for a category, assigning one if needed."""
    try:
        result = await uc.execute(caller.caller_id, body.category, body.intake_summary)
        await commit_unit_of_work(session)
    except RoutingError as e:
        raise to_http_exception(e) from e

    return {
        "professional": _serialize_professional(result.professional),
        "is_existing": result.is_existing,
    }


@router.get("/assignments")
async def list_my_professionals(
    caller: Caller = Depends(get_caller),
    uc: ListVictimAssignmentsUseCase = Depends(get_victim_assignments_uc),
):
    """Professionals currently assigned to the calling victim."""
    try:
        rows = await uc.execute(caller.caller_id)
    except RoutingError as e:
        raise to_http_exception(e) from e

    return {
        "professionals": [
            {
                "professional": _serialize_professional(r.professional),
                "category": r.assignment.category.value,
                "assigned_at": r.assignment.assigned_at.isoformat(),
                "is_first_contact": r.assignment.is_first_contact,
            }
            for r in rows
        ]
    }


@router.get("/assigned-victims")
async def list_assigned_victims(
    caller: Caller = Depends(get_caller),
    uc: ListProfessionalCaseloadUseCase = Depends(get_caseload_uc),
):
    """Victims currently routed to the calling professional."""
    try:
        assignments = await uc.execute(caller)
    except RoutingError as e:
        raise to_http_exception(e) from e

    return {
        "victims": [
            {
                "victim": {"id": a.victim_id},
                "category": a.category.value,
                "assigned_at": a.assigned_at.isoformat(),
                "intake_summary": a.intake_summary,
                "transfer_origin": a.transfer_origin,
                "transfer_reason": a.transfer_reason,
            }
            for a in assignments
        ]
    }


@router.post("/mark-contacted")
async def mark_contacted(
    caller: Caller = Depends(get_caller),
    uc: MarkContactedUseCase = Depends(get_mark_contacted_uc),
    session: AsyncSession = Depends(get_session),
):
    """Clear the first-contact flag on all of the caller's assignments."""
    try:
        await uc.execute(caller.caller_id)
        await commit_unit_of_work(session)
    except RoutingError as e:
        raise to_http_exception(e) from e

    return {"success": True}


@router.post("/transfer")
async def transfer_case(
    body: TransferRequest,
    caller: Caller = Depends(get_caller),
    uc: TransferCaseUseCase = Depends(get_transfer_uc),
    session: AsyncSession = Depends(get_session),
):
    """Hand the victim over to a professional of the requested category."""
    if not body.victim_id.strip():
        raise HTTPException(status_code=400, detail="victim_id is required")

    try:
        professional = await uc.execute(caller, body.victim_id, body.new_category, body.reason)
        await commit_unit_of_work(session)
    except RoutingError as e:
        raise to_http_exception(e) from e

    return {
        "success": True,
        "message": f"Chat transferred to {professional.category.value}",
        "professional": _serialize_professional(professional),
    }


@router.get("/transfers/{victim_id}")
async def transfer_history(
    victim_id: str,
    caller: Caller = Depends(get_caller),
    uc: TransferHistoryUseCase = Depends(get_transfer_history_uc),
):
    """Full transfer log for one victim, oldest first."""
    try:
        records = await uc.execute(caller, victim_id)
    except RoutingError as e:
        raise to_http_exception(e) from e

    return {
        "transfers": [
            {
                "category": r.category.value,
                "from_professional_id": r.from_professional_id,
                "previous_professional_id": r.previous_professional_id,
                "to_professional_id": r.to_professional_id,
                "reason": r.reason,
                "transferred_at": r.transferred_at.isoformat(),
            }
            for r in records
        ]
    }


def _serialize_professional(p: Professional) -> dict:
    return {
        "id": p.id,
        "name": p.display_name,
        "role": p.category.value,
        "email": p.email,
    }
