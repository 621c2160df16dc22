from __future__ import annotations

import io

from flask import Flask, send_file

from ..common.auth import login_required
from ..common.http import json_errors, ok
from ..container import Container
from .service import export_filename

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def register(app: Flask, container: Container) -> None:
    service = container.report_service

    @app.route("/api/reports/groups", methods=["GET"], endpoint="report_groups")
    @login_required
    @json_errors
    def report_groups():
        return ok([g.to_dict() for g in service.report_groups()])

    @app.route("/api/reports/classes/<class_id>/summary", methods=["GET"], endpoint="class_summary")
    @login_required
    @json_errors
    def class_summary(class_id: str):
        return ok([row.to_dict() for row in service.class_summary(class_id)])

    @app.route("/api/reports/classes/<class_id>/sheet", methods=["GET"], endpoint="class_sheet")
    @login_required
    @json_errors
    def class_sheet(class_id: str):
        return ok(service.class_sheet(class_id).to_dict())

    @app.route("/api/reports/students/<student_id>", methods=["GET"], endpoint="student_report")
    @login_required
    @json_errors
    def student_report(student_id: str):
        return ok([r.to_dict() for r in service.student_report(student_id)])

    @app.route("/api/reports/classes/<class_id>/export", methods=["GET"], endpoint="export_class")
    @login_required
    @json_errors
    def export_class(class_id: str):
        content = service.export_class_workbook(class_id)
        school_class = container.store.state.school_class(class_id)
        return send_file(
            io.BytesIO(content),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=export_filename(school_class),
        )
