from unittest import mock

from django.core.cache import cache
from django.test import Client, TestCase

from accounts.models import User
from archive.client import ArchiveStoreClient, ArchiveStoreError
from archive.importer import ArchiveImporter, normalize_handle
from archive.models import ArchiveImport
from burnernet.errors import NotFound, UpstreamServiceError, ValidationError
from burners.models import BurnerProfile, Post


class FakeArchiveStore(ArchiveStoreClient):
    """In-memory archive store with an optional failure at a given offset."""

    def __init__(self, accounts=None, messages=None, profiles=None, page_size=2):
        super().__init__("https://archive.example", "anon-key", page_size=page_size, session=mock.Mock())
        self.accounts = accounts or {"dana": "12345"}
        self.messages = messages if messages is not None else {}
        self.profiles = profiles or {}
        self.fail_at_offset = None
        self.requested_offsets = []

    def resolve_account(self, username):
        return self.accounts.get(username.lower())

    def get_profile(self, username):
        return self.profiles.get(username.lower())

    def fetch_page(self, account_id, offset, limit=None):
        self.requested_offsets.append(offset)
        if self.fail_at_offset is not None and offset >= self.fail_at_offset:
            raise ArchiveStoreError("Failed to reach archive store (503).")
        records = self.messages.get(account_id, [])
        return records[offset:offset + (limit or self.page_size)]


def tweets(*texts):
    return [{"tweet_id": str(index), "full_text": text} for index, text in enumerate(texts, start=1)]


class NormalizeHandleTests(TestCase):
    def test_accepts_handles(self):
        self.assertEqual(normalize_handle("@Dana_Ops"), "Dana_Ops")
        self.assertEqual(normalize_handle(" dana "), "dana")

    def test_rejects_invalid(self):
        for value in ("", "dana ops", "x" * 51, None, 7, "@"):
            with self.subTest(value=value):
                with self.assertRaises(ValidationError):
                    normalize_handle(value)


class ArchiveImporterTests(TestCase):
    def setUp(self):
        self.admin = User.objects.create_superuser("admin", "admin-pass")
        self.store = FakeArchiveStore(
            messages={"12345": tweets("first", "second", "   ", "fourth", "fifth")},
            profiles={"dana": {"username": "dana", "avatar_media_url": "https://img.example/dana.png"}},
        )
        self.importer = ArchiveImporter(self.store)

    def test_creates_archive_profile(self):
        profile = self.importer.create_profile_from_archive(self.admin, "@Dana")

        self.assertEqual(profile.codename, "ARCHIVE_DANA")
        self.assertTrue(profile.is_archive)
        self.assertEqual(profile.archive_account_id, "12345")
        self.assertEqual(profile.avatar, "https://img.example/dana.png")
        self.assertEqual(profile.personality, "Archive of Dana's posts")
        self.assertEqual(profile.background, "Imported from Community Archive")

    def test_codename_suffix_when_taken(self):
        BurnerProfile.objects.create(user=self.admin, codename="archive_dana", personality="p", background="b")
        BurnerProfile.objects.create(user=self.admin, codename="ARCHIVE_DANA_2", personality="p", background="b")

        self.assertEqual(ArchiveImporter.derive_codename("dana"), "ARCHIVE_DANA_3")

    def test_unknown_account(self):
        with self.assertRaises(NotFound):
            self.importer.create_profile_from_archive(self.admin, "ghost")
        self.assertFalse(BurnerProfile.objects.exists())

    def test_profile_lookup_failure_falls_back_to_default_avatar(self):
        with mock.patch.object(self.store, "get_profile", side_effect=ArchiveStoreError("down")):
            profile = self.importer.create_profile_from_archive(self.admin, "dana")

        self.assertEqual(profile.avatar, "default_avatar.png")

    def test_imports_all_pages_and_skips_blank_messages(self):
        profile = self.importer.create_profile_from_archive(self.admin, "dana")

        result = self.importer.import_messages(profile, "12345", username="dana")

        self.assertEqual(result.imported, 4)
        self.assertEqual(result.skipped, 1)
        self.assertEqual(result.resumed_from, 0)
        self.assertEqual(result.job.status, ArchiveImport.Status.COMPLETED)
        self.assertEqual(result.job.next_offset, 5)
        self.assertEqual(self.store.requested_offsets, [0, 2, 4, 5])

        texts = set(Post.objects.values_list("transformed_content", flat=True))
        self.assertEqual(texts, {"first", "second", "fourth", "fifth"})
        self.assertTrue(all(p.original_content == p.transformed_content for p in Post.objects.all()))
        profile.refresh_from_db()
        self.assertEqual(profile.post_count, 4)
        self.assertIsNotNone(profile.last_post_at)

    def test_failure_keeps_committed_pages_and_resumes(self):
        profile = self.importer.create_profile_from_archive(self.admin, "dana")
        self.store.fail_at_offset = 2

        with self.assertRaises(UpstreamServiceError):
            self.importer.import_messages(profile, "12345")

        job = ArchiveImport.objects.get()
        self.assertEqual(job.status, ArchiveImport.Status.FAILED)
        self.assertEqual(job.next_offset, 2)
        self.assertIn("503", job.error)
        self.assertEqual(Post.objects.count(), 2)

        self.store.fail_at_offset = None
        result = self.importer.import_messages(profile, "12345")

        self.assertEqual(result.job.pk, job.pk)
        self.assertEqual(result.resumed_from, 2)
        self.assertEqual(result.imported, 2)
        self.assertEqual(result.total_imported, 4)
        self.assertEqual(Post.objects.count(), 4)

    def test_completed_import_starts_a_new_run(self):
        profile = self.importer.create_profile_from_archive(self.admin, "dana")
        self.importer.import_messages(profile, "12345")

        result = self.importer.import_messages(profile, "12345")

        self.assertEqual(result.resumed_from, 0)
        self.assertEqual(ArchiveImport.objects.count(), 2)

    def test_empty_archive(self):
        profile = self.importer.create_profile_from_archive(self.admin, "dana")

        result = self.importer.import_messages(profile, "99999")

        self.assertEqual(result.imported, 0)
        self.assertEqual(result.job.status, ArchiveImport.Status.COMPLETED)


class ArchiveAPITests(TestCase):
    def setUp(self):
        cache.clear()
        self.admin = User.objects.create_superuser("admin", "admin-pass")
        self.member = User.objects.create_user("member", "pw", has_post_access=True)
        self.store = FakeArchiveStore(messages={"12345": tweets("first", "second", "third")})
        patcher = mock.patch("archive.views.build_importer", side_effect=lambda: ArchiveImporter(self.store))
        patcher.start()
        self.addCleanup(patcher.stop)
        self.client = Client()
        self.client.force_login(self.admin)

    def post(self, url, payload, client=None):
        return (client or self.client).post(url, payload, content_type="application/json")

    def test_admin_only(self):
        member = Client()
        member.force_login(self.member)

        self.assertEqual(self.post("/api/admin/archive/ingest", {"username": "dana"}, client=member).status_code, 403)
        self.assertEqual(Client().get("/api/admin/archive/tweets/dana").status_code, 401)

    def test_lists_archive_messages_with_cache(self):
        first = self.client.get("/api/admin/archive/tweets/Dana")

        self.assertEqual(first.status_code, 200)
        body = first.json()
        self.assertEqual(body["accountId"], "12345")
        self.assertEqual(body["totalTweets"], 3)
        self.assertIsNone(body["lastSync"])

        calls = len(self.store.requested_offsets)
        self.client.get("/api/admin/archive/tweets/dana")
        self.assertEqual(len(self.store.requested_offsets), calls)

    def test_unknown_account_is_404(self):
        self.assertEqual(self.client.get("/api/admin/archive/tweets/ghost").status_code, 404)

    def test_invalid_handle_is_400(self):
        response = self.post("/api/admin/archive/preview", {"username": "not a handle"})

        self.assertEqual(response.status_code, 400)
        self.assertIn("username", response.json()["fields"])

    def test_preview(self):
        response = self.post("/api/admin/archive/preview", {"username": "dana", "limit": 1})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["codename"], "ARCHIVE_DANA")
        self.assertEqual(len(body["tweets"]), 1)
        self.assertFalse(BurnerProfile.objects.exists())

    def test_create_burner_then_import(self):
        created = self.post("/api/admin/archive/create-burner", {"username": "dana"})
        self.assertEqual(created.status_code, 201)
        burner_id = created.json()["profile"]["id"]

        imported = self.post("/api/admin/archive/import", {"burnerId": burner_id})

        self.assertEqual(imported.status_code, 200)
        body = imported.json()
        self.assertEqual(body["count"], 3)
        self.assertEqual(body["totalImported"], 3)
        self.assertEqual(body["import"]["status"], "completed")

    def test_import_requires_account(self):
        burner = BurnerProfile.objects.create(user=self.admin, codename="PLAIN", personality="p", background="b")

        response = self.post("/api/admin/archive/import", {"burnerId": burner.id})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.post("/api/admin/archive/import", {"burnerId": 9999}).status_code, 404)

    def test_import_into_deactivated_profile_is_rejected(self):
        burner_id = self.post("/api/admin/archive/create-burner", {"username": "dana"}).json()["profile"]["id"]
        BurnerProfile.objects.filter(pk=burner_id).update(is_active=False)

        response = self.post("/api/admin/archive/import", {"burnerId": burner_id})

        self.assertEqual(response.status_code, 400)
        self.assertIn("burnerId", response.json()["fields"])
        self.assertFalse(Post.objects.exists())
        self.assertEqual(BurnerProfile.objects.get(pk=burner_id).post_count, 0)

    def test_ingest_twice_creates_suffixed_profile(self):
        first = self.post("/api/admin/archive/ingest", {"username": "dana"})
        second = self.post("/api/admin/archive/ingest", {"username": "dana"})

        self.assertEqual(first.status_code, 201)
        self.assertEqual(first.json()["profile"]["codename"], "ARCHIVE_DANA")
        self.assertEqual(first.json()["profile"]["postCount"], 3)
        self.assertEqual(second.json()["profile"]["codename"], "ARCHIVE_DANA_2")
        self.assertEqual(Post.objects.count(), 6)

    def test_upstream_failure_is_502(self):
        self.store.fail_at_offset = 0

        response = self.post("/api/admin/archive/ingest", {"username": "dana"})

        self.assertEqual(response.status_code, 502)
        self.assertEqual(ArchiveImport.objects.get().status, ArchiveImport.Status.FAILED)
