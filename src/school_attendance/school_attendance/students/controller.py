from __future__ import annotations

from flask import Flask

from ..common.auth import login_required
from ..common.http import date_field, json_body, json_errors, ok
from ..container import Container
from ..core.enums import StudentStatus
from ..core.exceptions import ValidationError


def _status(value) -> StudentStatus:
    try:
        return StudentStatus(value or StudentStatus.ACTIVE.value)
    except ValueError:
        raise ValidationError(f"Situação inválida: {value}") from None


def register(app: Flask, container: Container) -> None:
    service = container.student_service

    def _save(student_id=None):
        payload = json_body()
        return service.save(
            student_id=student_id,
            name=payload.get("name", ""),
            phone=payload.get("phone", ""),
            status=_status(payload.get("status")),
            observations=payload.get("observations", ""),
            registration_date=date_field(payload.get("registration_date"), "Data de matrícula"),
        )

    @app.route("/api/students", methods=["GET"], endpoint="list_students")
    @login_required
    @json_errors
    def list_students():
        return ok([s.to_dict() for s in service.list_students()])

    @app.route("/api/students", methods=["POST"], endpoint="create_student")
    @login_required
    @json_errors
    def create_student():
        return ok(_save().to_dict(), message="Aluno cadastrado", status=201)

    @app.route("/api/students/<student_id>", methods=["PUT"], endpoint="update_student")
    @login_required
    @json_errors
    def update_student(student_id: str):
        return ok(_save(student_id).to_dict(), message="Aluno atualizado")

    @app.route("/api/students/<student_id>/status", methods=["PATCH"], endpoint="change_student_status")
    @login_required
    @json_errors
    def change_student_status(student_id: str):
        student = service.change_status(student_id, _status(json_body().get("status")))
        return ok(student.to_dict())

    @app.route("/api/students/<student_id>", methods=["DELETE"], endpoint="delete_student")
    @login_required
    @json_errors
    def delete_student(student_id: str):
        service.delete(student_id)
        return ok(message="Aluno excluído")
