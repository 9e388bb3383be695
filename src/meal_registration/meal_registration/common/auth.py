from __future__ import annotations

from functools import wraps

from flask import jsonify, session

from ..core.enums import Role
from .responses import unauthorized


def current_identity() -> tuple[str, str]:
    """(tenant_id, employee_id) of the signed-in user; the session is filled by the auth layer."""
    return str(session["tenant_id"]), str(session["user_id"])


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session or "tenant_id" not in session:
            return unauthorized()
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session or "tenant_id" not in session:
                return unauthorized()
            if session.get("role") not in allowed:
                return (
                    jsonify({"code": "ERR_FORBIDDEN", "message": f"{' or '.join(sorted(allowed))} access required"}),
                    403,
                )
            return view(*args, **kwargs)

        return wrapper

    return decorator
