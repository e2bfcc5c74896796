from django.test import SimpleTestCase

from burners.transformer import MessageTransformer, Persona

GHOST = Persona(codename="GHOST", personality="cold, precise", background="Former signals analyst.")


class FakeLLM:
    def __init__(self, result=None, configured=True):
        self.result = result or {"success": True, "content": "Rendezvous shifted. 0900."}
        self.configured = configured
        self.calls = []

    def chat(self, messages, **kwargs):
        self.calls.append((messages, kwargs))
        return self.result


class MessageTransformerTests(SimpleTestCase):
    def test_returns_trimmed_rewrite(self):
        llm = FakeLLM({"success": True, "content": "  Rendezvous shifted. 0900.\n"})

        result = MessageTransformer(llm).transform("meeting moved to 9am", GHOST)

        self.assertEqual(result, "Rendezvous shifted. 0900.")
        messages, kwargs = llm.calls[0]
        self.assertEqual(messages[0]["role"], "system")
        self.assertIn("Codename: GHOST", messages[0]["content"])
        self.assertIn("Personality: cold, precise", messages[0]["content"])
        self.assertIn("Background: Former signals analyst.", messages[0]["content"])
        self.assertEqual(messages[1], {"role": "user", "content": "meeting moved to 9am"})
        self.assertEqual(kwargs, {"temperature": 0.7, "max_tokens": 500})

    def test_missing_credentials_return_original(self):
        llm = FakeLLM(configured=False)

        with self.assertLogs("burners.transformer", level="ERROR"):
            result = MessageTransformer(llm).transform("meeting moved to 9am", GHOST)

        self.assertEqual(result, "meeting moved to 9am")
        self.assertEqual(llm.calls, [])

    def test_failed_call_returns_original(self):
        llm = FakeLLM({"success": False, "error": "Language model request failed: 503 Server Error"})

        with self.assertLogs("burners.transformer", level="ERROR"):
            result = MessageTransformer(llm).transform("meeting moved to 9am", GHOST)

        self.assertEqual(result, "meeting moved to 9am")

    def test_blank_rewrite_returns_original(self):
        for content in ("", "   \n", None):
            with self.subTest(content=content):
                llm = FakeLLM({"success": True, "content": content})

                with self.assertLogs("burners.transformer", level="ERROR"):
                    result = MessageTransformer(llm).transform("meeting moved to 9am", GHOST)

                self.assertEqual(result, "meeting moved to 9am")
