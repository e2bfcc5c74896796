"""Shared JSON plumbing for the API views."""

import json
import logging
from functools import wraps
from typing import Any, Dict, Optional

from django.db import IntegrityError
from django.http import JsonResponse

from .errors import (
    ApiError,
    AuthenticationError,
    ConflictError,
    PermissionDenied,
    ValidationError,
)

logger = logging.getLogger(__name__)


def json_ok(payload: Optional[Dict[str, Any]] = None, status: int = 200) -> JsonResponse:
    body = {"success": True}
    if payload:
        body.update(payload)
    return JsonResponse(body, status=status, json_dumps_params={"ensure_ascii": False})


def json_error(
    message: str, status: int = 400, fields: Optional[Dict[str, str]] = None
) -> JsonResponse:
    payload: Dict[str, Any] = {"success": False, "error": message}
    if fields:
        payload["fields"] = fields
    return JsonResponse(payload, status=status)


def parse_body(request) -> Dict[str, Any]:
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ValidationError(f"Request body is not valid JSON: {exc}")
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object.")
    return payload


def require_text(payload: Dict[str, Any], field: str, *, max_length: Optional[int] = None) -> str:
    value = payload.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError.for_field(field, f"{field} must not be empty.")
    value = value.strip()
    if max_length is not None and len(value) > max_length:
        raise ValidationError.for_field(
            field, f"{field} must be at most {max_length} characters."
        )
    return value


def require_int(payload: Dict[str, Any], field: str) -> int:
    value = payload.get(field)
    if value is None:
        raise ValidationError.for_field(field, f"{field} must be provided.")
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        return int(value.strip())
    raise ValidationError.for_field(field, f"{field} must be an integer.")


def query_flag(request, name: str) -> Optional[bool]:
    """``True``/``False`` for ``true``/``false``; ``None`` when the parameter is absent."""

    raw = request.GET.get(name)
    if raw is None or not raw.strip():
        return None
    value = raw.strip().lower()
    if value not in ("true", "false"):
        raise ValidationError.for_field(name, f"{name} must be true or false.")
    return value == "true"


def api_view(func):
    """Translate service exceptions into JSON error responses."""

    @wraps(func)
    def _wrapped(request, *args, **kwargs):
        try:
            return func(request, *args, **kwargs)
        except ApiError as exc:
            return json_error(exc.message, status=exc.status, fields=exc.fields)
        except IntegrityError as exc:
            logger.warning("Integrity error on %s %s: %s", request.method, request.path, exc)
            conflict = ConflictError("Record conflicts with an existing one.")
            return json_error(conflict.message, status=conflict.status)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.path)
            return json_error("Internal server error.", status=500)

    return _wrapped


def login_required_api(func):
    @wraps(func)
    def _wrapped(request, *args, **kwargs):
        if not request.user.is_authenticated:
            raise AuthenticationError("Authentication required.")
        return func(request, *args, **kwargs)

    return _wrapped


def admin_required_api(func):
    @wraps(func)
    def _wrapped(request, *args, **kwargs):
        if not request.user.is_authenticated:
            raise AuthenticationError("Authentication required.")
        if not request.user.is_admin:
            raise PermissionDenied("Admin access required.")
        return func(request, *args, **kwargs)

    return _wrapped
