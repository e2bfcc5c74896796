from __future__ import annotations

from django.conf import settings
from django.core.cache import cache
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from burnernet.api import admin_required_api, api_view, json_ok, parse_body, require_int
from burnernet.errors import NotFound, ValidationError
from burners.models import BurnerProfile

from .importer import ArchiveImporter, ImportResult, normalize_handle
from .models import ArchiveImport

PREVIEW_LIMIT = 20


def build_importer() -> ArchiveImporter:
    return ArchiveImporter.from_settings()


def _import_payload(result: ImportResult) -> dict:
    return {
        "burnerId": result.job.burner_id,
        "count": result.imported,
        "skipped": result.skipped,
        "totalImported": result.total_imported,
        "resumedFrom": result.resumed_from,
        "import": result.job.to_payload(),
    }


def _last_sync(handle: str):
    job = ArchiveImport.objects.filter(username__iexact=handle).order_by("-updated_at").first()
    return job.updated_at.isoformat() if job else None


@require_http_methods(["GET"])
@api_view
@admin_required_api
def archive_tweets(request, username: str) -> JsonResponse:
    handle = normalize_handle(username).lower()
    cache_key = f"archive:tweets:{handle}"
    data = cache.get(cache_key)
    if data is None:
        importer = build_importer()
        account_id = importer.require_external_account(handle)
        tweets = importer.fetch_all_messages(account_id)
        data = {
            "username": handle,
            "accountId": account_id,
            "tweets": tweets,
            "totalTweets": len(tweets),
        }
        cache.set(cache_key, data, getattr(settings, "ARCHIVE_PREVIEW_TTL", 600))
    return json_ok({**data, "lastSync": _last_sync(handle)})


@csrf_exempt
@require_http_methods(["POST"])
@api_view
@admin_required_api
def preview(request) -> JsonResponse:
    payload = parse_body(request)
    handle = normalize_handle(payload.get("username"))
    limit = payload.get("limit", PREVIEW_LIMIT)
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValidationError.for_field("limit", "limit must be a positive integer.")

    importer = build_importer()
    account_id = importer.require_external_account(handle)
    tweets = importer.fetch_first_page(account_id, min(limit, importer.client.page_size))
    return json_ok(
        {
            "username": handle,
            "accountId": account_id,
            "profile": importer.fetch_profile_info(handle),
            "codename": importer.derive_codename(handle),
            "tweets": tweets,
        }
    )


@csrf_exempt
@require_http_methods(["POST"])
@api_view
@admin_required_api
def create_burner(request) -> JsonResponse:
    payload = parse_body(request)
    profile = build_importer().create_profile_from_archive(request.user, payload.get("username"))
    return json_ok({"profile": profile.to_payload()}, status=201)


@csrf_exempt
@require_http_methods(["POST"])
@api_view
@admin_required_api
def import_messages(request) -> JsonResponse:
    payload = parse_body(request)
    burner = BurnerProfile.objects.filter(pk=require_int(payload, "burnerId")).first()
    if burner is None:
        raise NotFound("Burner profile not found.")
    if not burner.is_active:
        raise ValidationError.for_field("burnerId", "Burner profile is deactivated.")

    importer = build_importer()
    username = payload.get("username")
    account_id = payload.get("accountId")
    handle = ""
    if account_id not in (None, ""):
        account_id = str(account_id)
    elif username:
        handle = normalize_handle(username)
        account_id = importer.require_external_account(handle)
    elif burner.archive_account_id:
        account_id = burner.archive_account_id
    else:
        raise ValidationError.for_field("accountId", "accountId or username must be provided.")

    result = importer.import_messages(burner, account_id, username=handle)
    return json_ok(_import_payload(result))


@csrf_exempt
@require_http_methods(["POST"])
@api_view
@admin_required_api
def ingest(request) -> JsonResponse:
    payload = parse_body(request)
    handle = normalize_handle(payload.get("username"))
    importer = build_importer()
    profile = importer.create_profile_from_archive(request.user, handle)
    result = importer.import_messages(profile, profile.archive_account_id, username=handle)
    profile.refresh_from_db()
    return json_ok({"profile": profile.to_payload(), **_import_payload(result)}, status=201)
