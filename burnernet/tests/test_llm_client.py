from unittest import mock

import requests
from django.test import SimpleTestCase, override_settings

from burnernet.llm_client import LLMClient


def _response(payload, status=200):
    response = mock.Mock()
    response.status_code = status
    response.json.return_value = payload
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    else:
        response.raise_for_status.return_value = None
    return response


class LLMClientTests(SimpleTestCase):
    def setUp(self):
        self.session = mock.Mock()
        self.client = LLMClient(
            "https://llm.example/v1/", "sk-test", model="gpt-4o", timeout=5, session=self.session
        )

    def test_returns_content_on_success(self):
        self.session.post.return_value = _response(
            {"choices": [{"message": {"content": "Rewritten."}}]}
        )

        result = self.client.chat([{"role": "user", "content": "hi"}], temperature=0.7, max_tokens=500)

        self.assertTrue(result["success"])
        self.assertEqual(result["content"], "Rewritten.")
        url = self.session.post.call_args.args[0]
        kwargs = self.session.post.call_args.kwargs
        self.assertEqual(url, "https://llm.example/v1/chat/completions")
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer sk-test")
        self.assertEqual(kwargs["json"]["model"], "gpt-4o")
        self.assertEqual(kwargs["json"]["temperature"], 0.7)
        self.assertEqual(kwargs["json"]["max_tokens"], 500)
        self.assertEqual(kwargs["timeout"], 5)

    def test_reports_http_errors(self):
        self.session.post.return_value = _response({}, status=500)

        result = self.client.chat([{"role": "user", "content": "hi"}])

        self.assertFalse(result["success"])
        self.assertIn("Language model request failed", result["error"])

    def test_reports_connection_errors(self):
        self.session.post.side_effect = requests.ConnectionError("refused")

        result = self.client.chat([{"role": "user", "content": "hi"}])

        self.assertFalse(result["success"])

    def test_reports_missing_choices(self):
        self.session.post.return_value = _response({"choices": []})

        result = self.client.chat([{"role": "user", "content": "hi"}])

        self.assertFalse(result["success"])
        self.assertIn("no usable content", result["error"])

    def test_reports_null_content(self):
        self.session.post.return_value = _response({"choices": [{"message": {"content": None}}]})

        result = self.client.chat([{"role": "user", "content": "hi"}])

        self.assertFalse(result["success"])
        self.assertIn("no usable content", result["error"])

    def test_joins_content_parts(self):
        self.session.post.return_value = _response(
            {"choices": [{"message": {"content": [{"type": "text", "text": "Rend"}, {"text": "ezvous."}]}}]}
        )

        result = self.client.chat([{"role": "user", "content": "hi"}])

        self.assertEqual(result["content"], "Rendezvous.")

    def test_unconfigured_client_does_not_call_out(self):
        client = LLMClient("https://llm.example/v1", None, session=self.session)

        result = client.chat([{"role": "user", "content": "hi"}])

        self.assertFalse(result["success"])
        self.session.post.assert_not_called()

    @override_settings(LLM_BASE_URL="https://llm.internal/v1", LLM_API_KEY="k", LLM_MODEL="m", LLM_TIMEOUT=9)
    def test_from_settings(self):
        client = LLMClient.from_settings()

        self.assertTrue(client.configured)
        self.assertEqual(client.model, "m")
        self.assertEqual(client.timeout, 9)
