from __future__ import annotations

from fastapi import HTTPException, Request

# Sessions are issued by the auth service; this app only reads them.
# A session user looks like ``{"user_id": ..., "role": "user" | "admin"}``.


def require_user(request: Request) -> dict:
    """Raise 401 if the session carries no user id."""
    user = request.session.get("user")
    if not user or not user.get("user_id"):
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_admin(request: Request) -> dict:
    """Raise 401 if not logged in, 403 if not admin."""
    user = require_user(request)
    if user.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
