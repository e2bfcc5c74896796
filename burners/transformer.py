"""Rewrites post text in a burner persona's voice via the language model."""

import logging
from dataclasses import dataclass
from typing import Optional

from burnernet.llm_client import LLMClient

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a message transformer that rewrites messages in the style of a specific persona.

Persona details:
- Codename: {codename}
- Personality: {personality}
- Background: {background}

Your task is to rewrite the provided message while:
1. Maintaining the core information and intent
2. Adapting the writing style to match the persona's personality
3. Incorporating relevant background knowledge
4. Keeping the spy/intelligence theme

Respond with ONLY the transformed message, no explanations or additional text."""


@dataclass(frozen=True)
class Persona:
    codename: str
    personality: str
    background: str

    @classmethod
    def from_profile(cls, profile) -> "Persona":
        return cls(
            codename=profile.codename,
            personality=profile.personality,
            background=profile.background,
        )


class MessageTransformer:
    """Best-effort rewrite: any failure returns the original text unchanged."""

    temperature = 0.7
    max_tokens = 500

    def __init__(self, llm: LLMClient):
        self.llm = llm

    @classmethod
    def from_settings(cls) -> "MessageTransformer":
        return cls(LLMClient.from_settings())

    def transform(self, original_text: str, persona: Persona) -> str:
        if not self.llm.configured:
            logger.error("Language model API key not configured; posting %s text unchanged", persona.codename)
            return original_text

        logger.info("Transforming message for profile %s", persona.codename)
        result = self.llm.chat(
            [
                {
                    "role": "system",
                    "content": SYSTEM_PROMPT.format(
                        codename=persona.codename,
                        personality=persona.personality,
                        background=persona.background,
                    ),
                },
                {"role": "user", "content": original_text},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        if not result.get("success"):
            logger.error("Failed to transform message: %s", result.get("error"))
            return original_text

        content: Optional[str] = result.get("content")
        transformed = content.strip() if isinstance(content, str) else ""
        if not transformed:
            logger.error("No transformed content received from language model")
            return original_text
        return transformed
