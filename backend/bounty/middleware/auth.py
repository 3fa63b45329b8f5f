"""Identity dependencies.

Authentication happens upstream; the gateway forwards the verified, opaque
user id in the X-User-Id header and the engine trusts it as given.
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from bounty.config import settings


def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing user identity",
        )
    return x_user_id.strip()


def require_operator(user_id: str = Depends(get_current_user_id)) -> str:
    if user_id not in settings.operator_ids:
        raise HTTPException(status_code=403, detail="Operator role required")
    return user_id
