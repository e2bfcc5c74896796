#!/usr/bin/env python3
"""
Simulate a BurnerNet round against a running backend service.

Usage:
    python simulate_burner_session.py --base-url http://localhost:8000 \
        --admin-username admin --admin-password secret

The script exercises the end-to-end flow:
1) An admin issues an invite code.
2) "agent7" registers with it, creates the burner "GHOST" and posts.
3) A second user guesses agent7 as the author; the guess response must not
   reveal whether it was correct, but the admin statistics must count it.

It communicates purely over HTTP, mimicking a front-end client.
"""

import argparse
import sys
import uuid
from typing import Dict, Iterable, Optional

try:
    import requests
except ModuleNotFoundError as exc:  # pragma: no cover - runtime dependency notice
    raise SystemExit(
        "The simulate_burner_session script requires the 'requests' package. "
        "Install it via `pip install requests` and rerun."
    ) from exc


TIMEOUT = 30  # seconds per request; post creation waits on the language model


class BurnerNetClient:
    """One logged-in browser: a requests session keeps the session cookie."""

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()

    def _request(
        self,
        method: str,
        path: str,
        expected_status: Iterable[int],
        json_payload: Optional[Dict] = None,
    ) -> Dict:
        url = f"{self.base_url}{path}"
        response = self.session.request(
            method=method,
            url=url,
            json=json_payload,
            timeout=TIMEOUT,
        )
        if response.status_code not in expected_status:
            raise RuntimeError(
                f"{method} {path} returned {response.status_code}: {response.text}"
            )
        try:
            return response.json()
        except ValueError as exc:
            raise RuntimeError(f"Response from {path} was not valid JSON.") from exc

    # Accounts -----------------------------------------------------------

    def login(self, username: str, password: str) -> Dict:
        data = self._request("POST", "/api/login", {200}, {"username": username, "password": password})
        print(f"[info] logged in as {data['user']['username']} (admin={data['user']['isAdmin']})")
        return data["user"]

    def register(self, username: str, password: str, invite_code: Optional[str] = None) -> Dict:
        payload = {"username": username, "password": password}
        if invite_code:
            payload["inviteCode"] = invite_code
        data = self._request("POST", "/api/register", {201}, payload)
        user = data["user"]
        print(f"[info] registered {user['username']} (post access={user['hasPostAccess']})")
        return user

    def create_invite_code(self) -> str:
        data = self._request("POST", "/api/invite-codes", {201})
        code = data["inviteCode"]["code"]
        print(f"[info] invite code issued: {code}")
        return code

    # Burners and posts --------------------------------------------------

    def create_burner(self, codename: str, personality: str, background: str) -> Dict:
        data = self._request(
            "POST",
            "/api/burner-profiles",
            {201},
            {"codename": codename, "personality": personality, "background": background},
        )
        profile = data["profile"]
        print(f"[info] burner created: {profile['codename']} (id={profile['id']}, active={profile['isActive']})")
        return profile

    def create_post(self, burner_id: int, text: str) -> Dict:
        data = self._request(
            "POST", "/api/posts", {201}, {"burnerId": burner_id, "originalContent": text}
        )
        post = data["post"]
        print(f"[info] post #{post['id']} published: {post['transformedContent']!r}")
        return post

    def guess(self, post_id: int, guessed_user_id: int) -> Dict:
        data = self._request(
            "POST",
            "/api/identity-guesses",
            {201},
            {"postId": post_id, "guessedUserId": guessed_user_id},
        )
        guess = data["guess"]
        if "isCorrect" in guess:
            raise RuntimeError("Guess response leaked the correctness flag.")
        print(f"[info] guess #{guess['id']} recorded for post #{post_id}")
        return guess

    def stats(self) -> Dict:
        return self._request("GET", "/api/admin/stats", {200})["stats"]


def scenario_guess_round(base_url: str, admin_username: str, admin_password: str):
    print("\n=== Scenario: invite, post, guess ===")
    suffix = uuid.uuid4().hex[:6].upper()

    admin = BurnerNetClient(base_url)
    admin.login(admin_username, admin_password)
    before = admin.stats()["guesses"]["correct"]
    invite_code = admin.create_invite_code()

    author = BurnerNetClient(base_url)
    author_user = author.register(f"agent7_{suffix}", "correct horse battery", invite_code)
    if not author_user["hasPostAccess"]:
        raise RuntimeError("Invite code did not grant post access.")
    burner = author.create_burner(f"GHOST_{suffix}", "cold, precise", "Former signals analyst.")
    post = author.create_post(burner["id"], "meeting moved to 9am")

    rival = BurnerNetClient(base_url)
    rival.register(f"rival_{suffix}", "another long password")
    rival.guess(post["id"], author_user["id"])

    after = admin.stats()["guesses"]["correct"]
    if after != before + 1:
        raise RuntimeError(f"Expected correct guesses to grow by one, got {before} -> {after}.")
    print("[info] admin statistics counted the correct guess.")


def main():
    parser = argparse.ArgumentParser(description="Simulate a BurnerNet guessing round via HTTP requests.")
    parser.add_argument(
        "--base-url",
        default="http://localhost:8000",
        help="Root URL of the running Django service (default: http://localhost:8000)",
    )
    parser.add_argument("--admin-username", default="admin")
    parser.add_argument("--admin-password", required=True)
    args = parser.parse_args()

    try:
        scenario_guess_round(args.base_url, args.admin_username, args.admin_password)
    except Exception as exc:
        print(f"[error] {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    print("\n[info] All scenarios completed successfully.")


if __name__ == "__main__":
    main()
