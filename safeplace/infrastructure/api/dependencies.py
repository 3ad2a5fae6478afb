"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from safeplace.adapters.persistence.database import get_session
from safeplace.adapters.persistence.repositories import (
    SqlAssignmentStore,
    SqlProfessionalDirectory,
)
from safeplace.application.use_cases.allocate_professional import AllocateProfessionalUseCase
from safeplace.application.use_cases.case_queries import (
    ListProfessionalCaseloadUseCase,
    ListVictimAssignmentsUseCase,
    MarkContactedUseCase,
    TransferHistoryUseCase,
)
from safeplace.application.use_cases.classify_situation import ClassifySituationUseCase
from safeplace.application.use_cases.transfer_case import TransferCaseUseCase
from safeplace.config import settings
from safeplace.domain.policies.classification import KeywordSets
from safeplace.domain.policies.selection import SelectionStrategy, UniformRandomSelection

# Singletons (stateless)
_keywords = KeywordSets.build(
    legal=settings.classifier_legal_keywords,
    counsellor=settings.classifier_counsellor_keywords,
)
_selector: SelectionStrategy = UniformRandomSelection()


def get_selector() -> SelectionStrategy:
    return _selector


def get_classify_uc() -> ClassifySituationUseCase:
    return ClassifySituationUseCase(keywords=_keywords)


def get_allocate_uc(
    session: AsyncSession = Depends(get_session),
    selector: SelectionStrategy = Depends(get_selector),
) -> AllocateProfessionalUseCase:
    return AllocateProfessionalUseCase(
        store=SqlAssignmentStore(session),
        directory=SqlProfessionalDirectory(session),
        selector=selector,
    )


def get_transfer_uc(
    session: AsyncSession = Depends(get_session),
    selector: SelectionStrategy = Depends(get_selector),
) -> TransferCaseUseCase:
    return TransferCaseUseCase(
        store=SqlAssignmentStore(session),
        directory=SqlProfessionalDirectory(session),
        selector=selector,
    )


def get_victim_assignments_uc(
    session: AsyncSession = Depends(get_session),
) -> ListVictimAssignmentsUseCase:
    return ListVictimAssignmentsUseCase(
        store=SqlAssignmentStore(session),
        directory=SqlProfessionalDirectory(session),
    )


def get_caseload_uc(
    session: AsyncSession = Depends(get_session),
) -> ListProfessionalCaseloadUseCase:
    return ListProfessionalCaseloadUseCase(store=SqlAssignmentStore(session))


def get_mark_contacted_uc(session: AsyncSession = Depends(get_session)) -> MarkContactedUseCase:
    return MarkContactedUseCase(store=SqlAssignmentStore(session))


def get_transfer_history_uc(
    session: AsyncSession = Depends(get_session),
) -> TransferHistoryUseCase:
    return TransferHistoryUseCase(store=SqlAssignmentStore(session))
