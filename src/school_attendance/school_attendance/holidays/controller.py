from __future__ import annotations

from flask import Flask, request

from ..common.auth import login_required
from ..common.http import date_field, int_field, json_body, json_errors, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.holiday_service

    @app.route("/api/holidays", methods=["GET"], endpoint="list_holidays")
    @login_required
    @json_errors
    def list_holidays():
        year = int_field(request.args.get("year"), "Ano")
        month = int_field(request.args.get("month"), "Mês")
        if year is not None and month is not None:
            holidays = service.holidays_in_month(year, month)
        else:
            holidays = service.list_holidays()
        return ok([h.to_dict() for h in holidays])

    @app.route("/api/holidays", methods=["POST"], endpoint="create_holiday")
    @login_required
    @json_errors
    def create_holiday():
        payload = json_body()
        holiday = service.add(name=payload.get("name", ""), day=date_field(payload.get("date"), "Data"))
        return ok(holiday.to_dict(), message="Feriado cadastrado", status=201)

    @app.route("/api/holidays/<holiday_id>", methods=["DELETE"], endpoint="delete_holiday")
    @login_required
    @json_errors
    def delete_holiday(holiday_id: str):
        service.delete(holiday_id)
        return ok(message="Feriado excluído")
