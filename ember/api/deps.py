from typing import Optional
from fastapi import Header, HTTPException, Request, status

from ember.constants import MESSAGES
from ember.services.focus.engine import FocusSessionEngine


def get_engine(request: Request) -> FocusSessionEngine:
    return request.app.state.engine


def get_optional_session_key(
    x_session_id: Optional[str] = Header(default=None, alias="X-Session-Id"),
) -> Optional[str]:
    return x_session_id.strip() if x_session_id and x_session_id.strip() else None


def require_session_key(session_key: Optional[str]) -> str:
    if not session_key:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=MESSAGES["session_id_required"],
        )
    return session_key


def get_session_key(
    x_session_id: Optional[str] = Header(default=None, alias="X-Session-Id"),
) -> str:
    """The caller's session key from the X-Session-Id header"""
    return require_session_key(get_optional_session_key(x_session_id))
