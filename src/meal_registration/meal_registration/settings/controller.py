from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import login_required, roles_required
from ..common.responses import error_response
from ..core.enums import Role
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    svc = container.settings_service

    @app.route("/api/admin/settings/deadline", methods=["GET"], endpoint="settings_deadline_get")
    @login_required
    def settings_deadline_get():
        try:
            return jsonify({"data": svc.deadline_config().to_dict()})
        except DomainError as e:
            return error_response(e)

    @app.route("/api/admin/settings/deadline", methods=["PUT"], endpoint="settings_deadline_put")
    @roles_required(Role.ADMIN_HR)
    def settings_deadline_put():
        body = request.get_json(silent=True) or {}
        try:
            config = svc.update_deadline(deadline_time=body.get("deadline_time"), offset_days=body.get("offset_days"))
        except DomainError as e:
            return error_response(e)
        return jsonify({"data": config.to_dict()})

    @app.route("/api/admin/settings/cooking-days", methods=["GET"], endpoint="settings_cooking_days_get")
    def settings_cooking_days_get():
        # Public read: the employee calendar needs it before login completes.
        try:
            return jsonify({"data": svc.cooking_days().to_dict()})
        except DomainError as e:
            return error_response(e)

    @app.route("/api/admin/settings/cooking-days", methods=["PUT"], endpoint="settings_cooking_days_put")
    @roles_required(Role.ADMIN_HR)
    def settings_cooking_days_put():
        body = request.get_json(silent=True) or {}
        try:
            window = svc.update_cooking_days(start_day=body.get("start_day"), end_day=body.get("end_day"))
        except DomainError as e:
            return error_response(e)
        return jsonify({"data": window.to_dict()})

    @app.route("/api/admin/settings/auto-reset", methods=["GET"], endpoint="settings_auto_reset_get")
    @roles_required(Role.ADMIN_HR)
    def settings_auto_reset_get():
        try:
            return jsonify({"success": True, "data": svc.auto_reset_config().to_dict()})
        except DomainError as e:
            return error_response(e)

    @app.route("/api/admin/settings/auto-reset", methods=["PUT"], endpoint="settings_auto_reset_put")
    @roles_required(Role.ADMIN_HR)
    def settings_auto_reset_put():
        body = request.get_json(silent=True) or {}
        try:
            config = svc.update_auto_reset(enabled=body.get("enabled"), reset_time=body.get("reset_time"))
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "data": config.to_dict()})
