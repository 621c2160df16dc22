from __future__ import annotations

from flask import Flask, session

from ..common.auth import login_required
from ..common.http import json_body, json_errors, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    @json_errors
    def login():
        payload = json_body()
        user = container.auth_service.authenticate(payload.get("username", ""), payload.get("password", ""))
        session.clear()
        session["user_id"] = user.user_id
        session["name"] = user.full_name
        return ok({"user_id": user.user_id, "full_name": user.full_name}, message="Login realizado")

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok(message="Sessão encerrada")

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return ok({"user_id": session["user_id"], "full_name": session.get("name")})
