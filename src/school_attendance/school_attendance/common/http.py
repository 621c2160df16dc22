from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Optional

from flask import jsonify, request

from ..core.exceptions import AuthenticationError, NotFoundError, StoreError, ValidationError
from .datetime_utils import parse_optional_date

logger = logging.getLogger(__name__)


def ok(data=None, *, message: str | None = None, status: int = 200):
    payload = {"success": True, "data": data}
    if message:
        payload["message"] = message
    return jsonify(payload), status


def fail(message: str, status: int = 400):
    return jsonify({"success": False, "message": message}), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def date_field(value, field_name: str, *, required: bool = False) -> Optional[date]:
    try:
        parsed = parse_optional_date(value)
    except ValueError:
        raise ValidationError(f"{field_name}: data inválida (use AAAA-MM-DD)") from None
    if required and parsed is None:
        raise ValidationError(f"{field_name} é obrigatório")
    return parsed


def int_field(value, field_name: str, *, default: Optional[int] = None) -> Optional[int]:
    if value is None or str(value).strip() == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name}: número inválido") from None


def json_errors(view):
    """Translate domain exceptions into JSON responses.

    Store failures are terminal for the request: logged and reported, never retried.
    """

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except NotFoundError as e:
            return fail(str(e), 404)
        except ValidationError as e:
            return fail(str(e), 400)
        except AuthenticationError as e:
            return fail(str(e), 401)
        except StoreError:
            logger.exception("Store call failed in %s", view.__name__)
            return fail("Erro ao comunicar com o banco de dados", 502)

    return wrapper
