from __future__ import annotations

import hmac

from flask import Flask, jsonify, request

from ..common.logger import get_logger
from ..common.responses import error_response
from ..core.exceptions import DomainError
from ..container import Container

logger = get_logger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/cron/auto-reset-meals", methods=["POST"], endpoint="cron_auto_reset_meals")
    def cron_auto_reset_meals():
        secret = app.config.get("CRON_SECRET") or ""
        if secret and not hmac.compare_digest(request.headers.get("Authorization", ""), f"Bearer {secret}"):
            logger.warning("Unauthorized cron access attempt")
            return jsonify({"code": "ERR_UNAUTHORIZED", "message": "Unauthorized"}), 401

        try:
            outcome = container.auto_reset_service.run()
        except DomainError as e:
            return error_response(e)
        return jsonify(outcome.to_dict())
