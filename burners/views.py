from __future__ import annotations

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from burnernet.api import (
    api_view,
    json_ok,
    login_required_api,
    parse_body,
    query_flag,
    require_int,
    require_text,
)

from . import services
from .transformer import MessageTransformer


def build_transformer() -> MessageTransformer:
    return MessageTransformer.from_settings()


@csrf_exempt
@require_http_methods(["GET", "POST"])
@api_view
@login_required_api
def burner_profiles(request) -> JsonResponse:
    if request.method == "GET":
        profiles = [profile.to_payload() for profile in services.list_profiles(request.user)]
        return json_ok({"profiles": profiles})

    payload = parse_body(request)
    avatar = payload.get("avatar")
    profile = services.create_profile(
        request.user,
        codename=require_text(payload, "codename"),
        personality=require_text(payload, "personality"),
        background=require_text(payload, "background"),
        avatar=avatar.strip() if isinstance(avatar, str) else None,
        is_ai=request.user.is_admin and payload.get("isAI") is True,
    )
    return json_ok({"profile": profile.to_payload()}, status=201)


@csrf_exempt
@require_http_methods(["DELETE"])
@api_view
@login_required_api
def deactivate_profile(request, profile_id: int) -> JsonResponse:
    profile = services.deactivate_profile(request.user, profile_id)
    return json_ok({"message": "Profile deactivated", "profile": profile.to_payload()})


@csrf_exempt
@require_http_methods(["GET", "POST"])
@api_view
@login_required_api
def posts(request) -> JsonResponse:
    if request.method == "GET":
        show_ai_only = query_flag(request, "showAIOnly")
        payload = [post.to_payload(request.user) for post in services.list_posts(show_ai_only)]
        return json_ok({"posts": payload})

    payload = parse_body(request)
    post = services.create_post(
        request.user,
        require_int(payload, "burnerId"),
        payload.get("originalContent"),
        transformer=build_transformer(),
    )
    return json_ok({"post": post.to_payload(request.user)}, status=201)
