from __future__ import annotations

from flask import Flask

from ..common.auth import login_required
from ..common.http import date_field, fail, json_body, json_errors, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/classes/<class_id>/sessions", methods=["GET"], endpoint="class_sessions")
    @login_required
    @json_errors
    def class_sessions(class_id: str):
        return ok([d.to_dict() for d in service.session_dates(class_id)])

    @app.route("/api/classes/<class_id>/attendance", methods=["GET"], endpoint="attendance_sheet")
    @login_required
    @json_errors
    def attendance_sheet(class_id: str):
        return ok(service.sheet(class_id).to_dict())

    @app.route("/api/classes/<class_id>/attendance/toggle", methods=["POST"], endpoint="toggle_attendance")
    @login_required
    @json_errors
    def toggle_attendance(class_id: str):
        payload = json_body()
        outcome = service.toggle(
            class_id=class_id,
            student_id=payload.get("student_id", ""),
            day=date_field(payload.get("date"), "Data", required=True),
        )
        if outcome.busy:
            return ok(outcome.to_dict(), message="Aguarde: gravação em andamento", status=409)
        if outcome.error:
            return fail(f"Erro ao salvar chamada: {outcome.error}", 502)
        return ok(outcome.to_dict())
