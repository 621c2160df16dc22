from __future__ import annotations

from flask import Flask, request

from ..common.auth import login_required
from ..common.http import int_field, json_errors, ok
from ..container import Container
from ..core.enums import DashboardMode
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard")
    @login_required
    @json_errors
    def dashboard():
        try:
            mode = DashboardMode(request.args.get("mode", DashboardMode.PERIOD.value))
        except ValueError:
            raise ValidationError("Modo inválido") from None

        overview = container.dashboard_service.overview(
            mode=mode,
            year=int_field(request.args.get("year"), "Ano"),
            semester=request.args.get("semester"),
        )
        return ok(overview.to_dict())
