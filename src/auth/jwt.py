"""Simple JWT authentication helpers.

Tokens are issued by the external auth service; this API only verifies
them and reads the user id from the ``sub`` claim.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

import jwt
from fastapi import Header, HTTPException, status

from src.core.config import settings


def require_auth(authorization: str = Header(...)) -> Dict[str, Any]:
    """Validate a bearer token and return decoded claims."""

    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
        )

    token = authorization.split(" ", 1)[1].strip()
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALG],
        )
    except jwt.InvalidTokenError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        ) from exc

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User missing in token",
        )

    return {"user_id": str(user_id), "claims": payload}


def optional_auth(authorization: Optional[str] = Header(None)) -> Optional[Dict[str, Any]]:
    """Like :func:`require_auth`, but anonymous requests get ``None``.

    A header that is present but invalid is still rejected.
    """

    if authorization is None:
        return None
    return require_auth(authorization)
