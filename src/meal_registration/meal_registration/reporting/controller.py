from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.auth import current_identity, login_required, roles_required
from ..common.datetime_utils import parse_iso_date, today_local
from ..common.responses import error_response
from ..core.constants import DEFAULT_TREND_DAYS
from ..core.enums import BoardFilter, Role
from ..core.exceptions import DomainError, ValidationError
from ..container import Container

_MANAGERS = (Role.MANAGER, Role.ADMIN_HR)


def _date_arg():
    value = request.args.get("date")
    if not value:
        return today_local()
    try:
        return parse_iso_date(value)
    except ValueError as e:
        raise ValidationError("Ngày không hợp lệ (YYYY-MM-DD)") from e


def register(app: Flask, container: Container) -> None:
    svc = container.reporting_service

    @app.route("/api/v1/dashboard/summary", methods=["GET"], endpoint="dashboard_summary")
    @roles_required(*_MANAGERS)
    def dashboard_summary():
        tenant_id = str(session["tenant_id"])
        try:
            return jsonify(svc.daily_summary(tenant_id, _date_arg()).to_dict())
        except DomainError as e:
            return error_response(e)

    @app.route("/api/v1/dashboard/weekly", methods=["GET"], endpoint="dashboard_weekly")
    @roles_required(*_MANAGERS)
    def dashboard_weekly():
        tenant_id = str(session["tenant_id"])
        try:
            points = svc.weekly_series(tenant_id)
        except DomainError as e:
            return error_response(e)
        return jsonify(
            {
                "data": [p.to_dict() for p in points],
                "total_registered": sum(p.registered_count for p in points),
            }
        )

    @app.route("/api/v1/dashboard/forecast", methods=["GET"], endpoint="dashboard_forecast")
    @roles_required(*_MANAGERS)
    def dashboard_forecast():
        tenant_id = str(session["tenant_id"])
        try:
            return jsonify(svc.forecast_tomorrow(tenant_id).to_dict())
        except DomainError as e:
            return error_response(e)

    @app.route("/api/v1/dashboard/board", methods=["GET"], endpoint="dashboard_board")
    @roles_required(Role.MANAGER, Role.ADMIN_HR, Role.KITCHEN)
    def dashboard_board():
        tenant_id = str(session["tenant_id"])
        try:
            board = svc.attendance_board(
                tenant_id,
                _date_arg(),
                status_filter=request.args.get("status", BoardFilter.ALL.value),
                search=request.args.get("search"),
                page=request.args.get("page", 1),
                page_size=request.args.get("page_size", app.config.get("DEFAULT_PAGE_SIZE", 10)),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify(board.to_dict())

    @app.route("/api/v1/dashboard/manager", methods=["GET"], endpoint="dashboard_manager")
    @roles_required(*_MANAGERS)
    def dashboard_manager():
        tenant_id = str(session["tenant_id"])
        try:
            overview = svc.manager_overview(tenant_id, request.args.get("days", DEFAULT_TREND_DAYS))
        except DomainError as e:
            return error_response(e)
        return jsonify(overview.to_dict())

    @app.route("/api/v1/dashboard/breakdown", methods=["GET"], endpoint="dashboard_breakdown")
    @roles_required(*_MANAGERS)
    def dashboard_breakdown():
        tenant_id = str(session["tenant_id"])
        try:
            day = _date_arg()
            rows = svc.department_breakdown(tenant_id, day)
        except DomainError as e:
            return error_response(e)
        return jsonify({"date": day.isoformat(), "departments": [r.to_dict() for r in rows]})

    @app.route("/api/v1/dashboard/refresh", methods=["POST"], endpoint="dashboard_refresh")
    @roles_required(Role.MANAGER, Role.ADMIN_HR, Role.KITCHEN)
    def dashboard_refresh():
        svc.notify_changed(str(session["tenant_id"]))
        return jsonify({"success": True})

    @app.route("/api/v1/stats/monthly", methods=["GET"], endpoint="stats_monthly")
    @login_required
    def stats_monthly():
        tenant_id, employee_id = current_identity()
        today = today_local()
        try:
            year = int(request.args.get("year") or today.year)
            month = int(request.args.get("month") or today.month)
        except ValueError:
            return error_response(ValidationError("Tháng/năm không hợp lệ"))

        try:
            stats = svc.monthly_stats(tenant_id=tenant_id, employee_id=employee_id, year=year, month=month)
        except DomainError as e:
            return error_response(e)
        return jsonify(stats.to_dict())
