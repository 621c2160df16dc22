from __future__ import annotations

from functools import wraps

from flask import jsonify, session


def login_required(view):
    """Every data route requires an authenticated session."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Faça login para continuar"}), 401
        return view(*args, **kwargs)

    return wrapper
