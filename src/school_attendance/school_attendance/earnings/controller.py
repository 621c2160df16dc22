from __future__ import annotations

from flask import Flask, request

from ..common.auth import login_required
from ..common.http import date_field, int_field, json_body, json_errors, ok
from ..container import Container
from ..core.constants import DEFAULT_CLASSES_PER_DAY
from .calculator import month_grid


def register(app: Flask, container: Container) -> None:
    service = container.earnings_service

    @app.route("/api/earnings", methods=["GET"], endpoint="earnings_history")
    @login_required
    @json_errors
    def earnings_history():
        return ok(
            {
                "history": [r.to_dict() for r in service.history()],
                "defaults": service.defaults().to_dict(),
            }
        )

    @app.route("/api/earnings/<int:year>/<int:month>", methods=["GET"], endpoint="earnings_month")
    @login_required
    @json_errors
    def earnings_month(year: int, month: int):
        record = service.get_month(year, month)
        grid = [[d.isoformat() if d else None for d in week] for week in month_grid(year, month)]
        return ok({"grid": grid, "record": record.to_dict() if record else None})

    @app.route("/api/earnings/<int:year>/<int:month>", methods=["PUT"], endpoint="save_earnings_month")
    @login_required
    @json_errors
    def save_earnings_month(year: int, month: int):
        payload = json_body()
        record = service.save_month(
            year=year,
            month=month,
            value_per_class=payload.get("value_per_class", "0"),
            classes_per_day=int_field(payload.get("classes_per_day"), "Aulas por dia", default=DEFAULT_CLASSES_PER_DAY),
            selected_days=[date_field(d, "Dia", required=True) for d in payload.get("selected_days") or []],
        )
        return ok(record.to_dict(), message="Ganhos salvos")

    @app.route("/api/earnings/<record_id>", methods=["DELETE"], endpoint="delete_earnings")
    @login_required
    @json_errors
    def delete_earnings(record_id: str):
        service.delete(record_id)
        return ok(message="Registro excluído")

    @app.route("/api/earnings/annual/<int:year>", methods=["GET"], endpoint="earnings_annual")
    @login_required
    @json_errors
    def earnings_annual(year: int):
        return ok({"year": year, "total": str(service.annual_total(year))})
