from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.auth import roles_required
from ..common.datetime_utils import parse_iso_date
from ..common.responses import error_response
from ..core.constants import DEFAULT_ACTIVITY_PAGE_SIZE
from ..core.enums import Role
from ..core.exceptions import DomainError, ValidationError
from ..container import Container


def _optional_date(name: str):
    value = request.args.get(name)
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except ValueError as e:
        raise ValidationError(f"{name} không hợp lệ (YYYY-MM-DD)") from e


def register(app: Flask, container: Container) -> None:
    svc = container.activity_service

    @app.route("/api/admin/activity-logs", methods=["GET"], endpoint="admin_activity_logs")
    @roles_required(Role.ADMIN_HR, Role.MANAGER)
    def admin_activity_logs():
        try:
            page = svc.list_logs(
                tenant_id=str(session["tenant_id"]),
                action=request.args.get("action"),
                employee_id=request.args.get("user_id"),
                from_date=_optional_date("from_date"),
                to_date=_optional_date("to_date"),
                page=request.args.get("page", 1),
                page_size=request.args.get("limit", DEFAULT_ACTIVITY_PAGE_SIZE),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "data": page.to_dict()})
