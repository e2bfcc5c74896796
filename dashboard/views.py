from __future__ import annotations

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from burnernet.api import admin_required_api, api_view, json_ok, parse_body
from burnernet.errors import ValidationError

from . import services
from .stats import OrmStatsReadModel, StatsReadModel


def build_stats_read_model() -> StatsReadModel:
    return OrmStatsReadModel()


@require_http_methods(["GET"])
@api_view
@admin_required_api
def stats(request) -> JsonResponse:
    return json_ok({"stats": build_stats_read_model().collect()})


@require_http_methods(["GET"])
@api_view
@admin_required_api
def list_users(request) -> JsonResponse:
    users = [services.user_summary(user) for user in services.annotated_users()]
    return json_ok({"users": users})


@require_http_methods(["GET"])
@api_view
@admin_required_api
def user_detail(request, user_id: int) -> JsonResponse:
    return json_ok({"user": services.user_detail(services.get_user(user_id))})


@csrf_exempt
@require_http_methods(["PATCH"])
@api_view
@admin_required_api
def user_role(request, user_id: int) -> JsonResponse:
    payload = parse_body(request)
    is_admin = payload.get("isAdmin")
    if is_admin is not None and not isinstance(is_admin, bool):
        raise ValidationError.for_field("isAdmin", "isAdmin must be a boolean.")
    user = services.set_admin_role(request.user, user_id, is_admin)
    return json_ok({"user": user.to_payload()})
