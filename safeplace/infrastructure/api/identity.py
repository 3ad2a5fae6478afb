"""Caller identity from headers set by the upstream identity provider.

The identity provider authenticates the subject and forwards its id and
role as ``X-Caller-Id`` / ``X-Caller-Role``. These are trusted as-is; this
module only checks that they are present and that the role is known.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request, Security
from fastapi.security import APIKeyHeader

from safeplace.domain.entities.caller import Caller
from safeplace.domain.value_objects.enums import CallerRole

logger = logging.getLogger(__name__)

_caller_id_header = APIKeyHeader(name="X-Caller-Id", auto_error=False)
_caller_role_header = APIKeyHeader(name="X-Caller-Role", auto_error=False)


async def get_caller(
    request: Request,
    caller_id: str | None = Security(_caller_id_header),
    caller_role: str | None = Security(_caller_role_header),
) -> Caller:
    """FastAPI dependency returning the authenticated Caller; 401/403 on failure."""
    if not caller_id or not caller_id.strip() or not caller_role:
        logger.warning("Missing identity headers on %s", request.url.path)
        raise HTTPException(
            status_code=401,
            detail="Missing X-Caller-Id / X-Caller-Role headers.",
        )

    try:
        role = CallerRole(caller_role.strip().lower())
    except ValueError:
        logger.warning("Unknown caller role %r on %s", caller_role, request.url.path)
        raise HTTPException(status_code=403, detail="Unknown caller role.") from None

    return Caller(caller_id=caller_id.strip(), role=role)
