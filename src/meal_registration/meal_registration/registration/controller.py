from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.auth import current_identity, login_required
from ..common.datetime_utils import parse_iso_date, today_local
from ..common.responses import error_response
from ..core.enums import OrderStatus
from ..core.exceptions import DomainError, ValidationError
from ..container import Container


def _request_context() -> dict:
    return {
        "user_name": session.get("name"),
        "user_email": session.get("email"),
        "user_agent": request.headers.get("User-Agent", "unknown"),
        "platform": request.headers.get("Sec-CH-UA-Platform", "unknown"),
    }


def _parse_dates(values) -> list:
    if not isinstance(values, list) or not values:
        raise ValidationError("Vui lòng chọn ít nhất 1 ngày")
    try:
        return [parse_iso_date(str(v)) for v in values]
    except ValueError as e:
        raise ValidationError("Ngày không hợp lệ (YYYY-MM-DD)") from e


def register(app: Flask, container: Container) -> None:
    svc = container.registration_service

    @app.route("/api/v1/orders/today", methods=["GET"], endpoint="orders_today")
    @login_required
    def orders_today():
        tenant_id, employee_id = current_identity()
        try:
            return jsonify(svc.today_status(tenant_id=tenant_id, employee_id=employee_id).to_dict())
        except DomainError as e:
            return error_response(e)

    @app.route("/api/v1/orders/toggle", methods=["POST"], endpoint="orders_toggle")
    @login_required
    def orders_toggle():
        tenant_id, employee_id = current_identity()
        payload = request.get_json(silent=True) or {}
        current = payload.get("current_status")
        try:
            current_status = OrderStatus(current) if current else None
        except ValueError:
            return error_response(ValidationError("Trạng thái không hợp lệ"))

        try:
            result = svc.toggle_today(
                tenant_id=tenant_id,
                employee_id=employee_id,
                current_status=current_status,
                context=_request_context(),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify(result.to_dict())

    @app.route("/api/v1/orders/bulk", methods=["POST"], endpoint="orders_bulk")
    @login_required
    def orders_bulk():
        tenant_id, employee_id = current_identity()
        payload = request.get_json(silent=True) or {}
        try:
            dates = _parse_dates(payload.get("dates"))
            try:
                status = OrderStatus(payload.get("status"))
            except ValueError as e:
                raise ValidationError("Trạng thái không hợp lệ") from e

            result = svc.bulk_apply(
                tenant_id=tenant_id,
                employee_id=employee_id,
                dates=dates,
                target_status=status,
                context=_request_context(),
            )
        except DomainError as e:
            return error_response(e)

        # Partial success is still a success: the body carries the per-date outcome.
        return jsonify(result.to_dict()), (207 if result.failed_dates else 200)

    @app.route("/api/v1/orders/calendar", methods=["GET"], endpoint="orders_calendar")
    @login_required
    def orders_calendar():
        tenant_id, employee_id = current_identity()
        today = today_local()
        try:
            year = int(request.args.get("year") or today.year)
            month = int(request.args.get("month") or today.month)
        except ValueError:
            return error_response(ValidationError("Tháng/năm không hợp lệ"))

        try:
            days = svc.month_calendar(tenant_id=tenant_id, employee_id=employee_id, year=year, month=month)
        except DomainError as e:
            return error_response(e)
        return jsonify({"year": year, "month": month, "days": [d.to_dict() for d in days]})

    @app.route("/api/v1/orders/history", methods=["GET"], endpoint="orders_history")
    @login_required
    def orders_history():
        tenant_id, employee_id = current_identity()
        try:
            data = svc.history(
                tenant_id=tenant_id,
                employee_id=employee_id,
                days=request.args.get("days", 30),
                page=request.args.get("page", 1),
                page_size=request.args.get("page_size", app.config.get("DEFAULT_PAGE_SIZE", 10)),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify(data)
