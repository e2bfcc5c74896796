from __future__ import annotations

from django.contrib.auth import login, logout
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from burnernet.api import (
    admin_required_api,
    api_view,
    json_ok,
    login_required_api,
    parse_body,
)

from . import services
from .models import User


@csrf_exempt
@require_http_methods(["POST"])
@api_view
def register(request) -> JsonResponse:
    payload = parse_body(request)
    user = services.register_user(
        payload.get("username"), payload.get("password"), payload.get("inviteCode")
    )
    login(request, user, backend="django.contrib.auth.backends.ModelBackend")
    return json_ok({"user": user.to_payload()}, status=201)


@csrf_exempt
@require_http_methods(["POST"])
@api_view
def login_view(request) -> JsonResponse:
    payload = parse_body(request)
    user = services.authenticate_user(
        request, payload.get("username"), payload.get("password")
    )
    login(request, user)
    return json_ok({"user": user.to_payload()})


@csrf_exempt
@require_http_methods(["POST"])
@api_view
def logout_view(request) -> JsonResponse:
    logout(request)
    return json_ok()


@require_http_methods(["GET"])
@api_view
def current_user(request) -> JsonResponse:
    if not request.user.is_authenticated:
        return json_ok({"user": None})
    return json_ok({"user": request.user.to_payload()})


@csrf_exempt
@require_http_methods(["POST"])
@api_view
@login_required_api
def upgrade(request) -> JsonResponse:
    payload = parse_body(request)
    user = services.upgrade_access(request.user, payload.get("inviteCode"))
    return json_ok({"user": user.to_payload()})


@require_http_methods(["GET"])
@api_view
@login_required_api
def list_users(request) -> JsonResponse:
    users = [
        {"id": user.id, "username": user.username}
        for user in User.objects.order_by("username")
    ]
    return json_ok({"users": users})


@csrf_exempt
@require_http_methods(["GET", "POST"])
@api_view
@admin_required_api
def invite_codes(request) -> JsonResponse:
    if request.method == "GET":
        codes = [code.to_payload() for code in services.list_invite_codes()]
        return json_ok({"inviteCodes": codes})

    invite = services.generate_invite_code(request.user)
    return json_ok({"inviteCode": invite.to_payload()}, status=201)
