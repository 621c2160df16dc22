from __future__ import annotations

from flask import Flask, request

from ..common.auth import login_required
from ..common.http import date_field, int_field, json_body, json_errors, ok
from ..container import Container
from ..core.enums import Weekday
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    service = container.class_service

    def _save(class_id=None):
        payload = json_body()
        return service.save(
            class_id=class_id,
            course_name=payload.get("course_name", ""),
            days=payload.get("days") or [],
            time=payload.get("time", ""),
            frequency=int_field(payload.get("frequency"), "Frequência", default=1),
            year=int_field(payload.get("year"), "Ano", default=0),
            semester=payload.get("semester", ""),
            student_ids=payload.get("student_ids") or [],
            start_date=date_field(payload.get("start_date"), "Data de início"),
            end_date=date_field(payload.get("end_date"), "Data de fim"),
        )

    @app.route("/api/classes", methods=["GET"], endpoint="list_classes")
    @login_required
    @json_errors
    def list_classes():
        year = int_field(request.args.get("year"), "Ano")
        semester = request.args.get("semester")
        weekday = request.args.get("weekday")

        if year is not None and semester:
            classes = service.classes_for_term(year, semester)
        else:
            classes = service.list_classes(include_archived=request.args.get("archived", "1") != "0")
        if weekday:
            try:
                classes = service.classes_on_weekday(Weekday(weekday), classes)
            except ValueError:
                raise ValidationError(f"Dia da semana inválido: {weekday}") from None
        return ok([c.to_dict() for c in classes])

    @app.route("/api/classes", methods=["POST"], endpoint="create_class")
    @login_required
    @json_errors
    def create_class():
        return ok(_save().to_dict(), message="Turma cadastrada", status=201)

    @app.route("/api/classes/<class_id>", methods=["PUT"], endpoint="update_class")
    @login_required
    @json_errors
    def update_class(class_id: str):
        return ok(_save(class_id).to_dict(), message="Turma atualizada")

    @app.route("/api/classes/<class_id>", methods=["DELETE"], endpoint="delete_class")
    @login_required
    @json_errors
    def delete_class(class_id: str):
        service.delete(class_id)
        return ok(message="Turma excluída")

    @app.route("/api/classes/reorder", methods=["POST"], endpoint="reorder_classes")
    @login_required
    @json_errors
    def reorder_classes():
        payload = json_body()
        classes = service.reorder(
            int_field(payload.get("from_index"), "Origem", default=-1),
            int_field(payload.get("to_index"), "Destino", default=-1),
        )
        return ok([c.to_dict() for c in classes])

    @app.route("/api/classes/clone", methods=["POST"], endpoint="clone_classes")
    @login_required
    @json_errors
    def clone_classes():
        payload = json_body()
        clones = service.clone_to_next_semester(
            year=int_field(payload.get("year"), "Ano", default=0),
            semester=payload.get("semester", ""),
        )
        return ok([c.to_dict() for c in clones], message=f"{len(clones)} turmas clonadas", status=201)

    @app.route("/api/classes/term-dates", methods=["POST"], endpoint="update_term_dates")
    @login_required
    @json_errors
    def update_term_dates():
        payload = json_body()
        updated = service.update_term_dates(
            year=int_field(payload.get("year"), "Ano", default=0),
            semester=payload.get("semester", ""),
            start=date_field(payload.get("start_date"), "Data de início", required=True),
            end=date_field(payload.get("end_date"), "Data de fim", required=True),
        )
        return ok([c.to_dict() for c in updated], message=f"{len(updated)} turmas atualizadas")
