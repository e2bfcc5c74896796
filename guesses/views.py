from __future__ import annotations

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from burnernet.api import api_view, json_ok, login_required_api, parse_body, require_int

from . import services


@csrf_exempt
@require_http_methods(["POST"])
@api_view
@login_required_api
def create_guess(request) -> JsonResponse:
    payload = parse_body(request)
    guess = services.create_guess(
        request.user,
        require_int(payload, "postId"),
        require_int(payload, "guessedUserId"),
    )
    return json_ok({"guess": guess.to_payload()}, status=201)


@require_http_methods(["GET"])
@api_view
@login_required_api
def list_guesses(request, post_id: int) -> JsonResponse:
    guesses = [guess.to_payload() for guess in services.list_guesses(post_id)]
    return json_ok({"postId": post_id, "guesses": guesses})
