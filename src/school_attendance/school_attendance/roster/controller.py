from __future__ import annotations

from flask import Flask, request

from ..common.auth import login_required
from ..common.http import json_body, json_errors, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.roster_service

    @app.route("/api/classes/<class_id>/roster", methods=["GET"], endpoint="class_roster")
    @login_required
    @json_errors
    def class_roster(class_id: str):
        return ok(service.roster(class_id).to_dict())

    @app.route("/api/classes/<class_id>/available-students", methods=["GET"], endpoint="available_students")
    @login_required
    @json_errors
    def available_students(class_id: str):
        students = service.available_students(class_id, request.args.get("search", ""))
        return ok([s.to_dict() for s in students])

    @app.route("/api/classes/<class_id>/roster/<student_id>", methods=["POST"], endpoint="enroll_student")
    @login_required
    @json_errors
    def enroll_student(class_id: str, student_id: str):
        student, school_class = service.enroll(class_id=class_id, student_id=student_id)
        return ok({"student": student.to_dict(), "class": school_class.to_dict()}, message="Aluno matriculado")

    @app.route("/api/classes/<class_id>/roster/<student_id>", methods=["DELETE"], endpoint="remove_student")
    @login_required
    @json_errors
    def remove_student(class_id: str, student_id: str):
        student, school_class = service.remove(class_id=class_id, student_id=student_id)
        return ok({"student": student.to_dict(), "class": school_class.to_dict()}, message="Aluno removido da turma")

    @app.route("/api/students/<student_id>/transfer", methods=["POST"], endpoint="transfer_student")
    @login_required
    @json_errors
    def transfer_student(student_id: str):
        payload = json_body()
        student, source, target = service.transfer(
            student_id=student_id,
            from_class_id=payload.get("from_class_id", ""),
            to_class_id=payload.get("to_class_id", ""),
        )
        return ok(
            {"student": student.to_dict(), "from": source.to_dict(), "to": target.to_dict()},
            message="Aluno transferido",
        )
