import logging
from typing import Any, Dict, List, Optional

import requests
from django.conf import settings
from requests import RequestException

logger = logging.getLogger(__name__)


class LLMClient:
    """Chat-completion client for an OpenAI-compatible language model provider."""

    def __init__(
        self,
        base_url: Optional[str],
        api_key: Optional[str],
        *,
        model: str = "gpt-4o",
        timeout: int = 60,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls) -> "LLMClient":
        return cls(
            getattr(settings, "LLM_BASE_URL", None),
            getattr(settings, "LLM_API_KEY", None),
            model=getattr(settings, "LLM_MODEL", "gpt-4o"),
            timeout=getattr(settings, "LLM_TIMEOUT", 60),
        )

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.api_key)

    def _request_body(self, messages, model, temperature, max_tokens, extra) -> Dict[str, Any]:
        body: Dict[str, Any] = {"model": model or self.model, "messages": messages, "stream": False}
        if temperature is not None:
            body["temperature"] = temperature
        if max_tokens is not None:
            body["max_tokens"] = max_tokens
        body.update(extra)
        return body

    @staticmethod
    def _first_choice_text(data: Dict[str, Any]) -> str:
        # Some providers return content as a list of typed parts.
        content = data["choices"][0]["message"]["content"]
        if isinstance(content, list):
            content = "".join(
                part.get("text", "") if isinstance(part, dict) else str(part) for part in content
            )
        if not isinstance(content, str):
            raise TypeError(f"content is {type(content).__name__}")
        return content

    def chat(
        self,
        messages: List[Dict[str, str]],
        *,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        """Run one chat completion.

        Never raises for provider trouble. The result is ``{"success": True,
        "content", "response"}`` or ``{"success": False, "error"}``.
        """

        if not self.configured:
            return {"success": False, "error": "Language model is not configured."}

        try:
            response = self.session.post(
                f"{self.base_url.rstrip('/')}/chat/completions",
                headers={"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"},
                json=self._request_body(messages, model, temperature, max_tokens, kwargs),
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except RequestException as exc:
            logger.exception("Language model request to %s failed", self.base_url)
            return {"success": False, "error": f"Language model request failed: {exc}"}
        except ValueError as exc:
            logger.exception("Language model answered with invalid JSON")
            return {"success": False, "error": f"Language model returned invalid JSON: {exc}"}

        try:
            content = self._first_choice_text(data)
        except (KeyError, IndexError, AttributeError, TypeError) as exc:
            logger.error("Language model answer had no usable content: %r", exc)
            return {"success": False, "error": f"Language model answer had no usable content: {exc!r}"}

        return {"success": True, "response": data, "content": content}
