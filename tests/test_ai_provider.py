import os
import sys
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.ai.config import load_ai_config  # noqa: E402
from app.ai.factory import build_ai_client  # noqa: E402
from app.ai.providers.openai_provider import OpenAICompatibleProvider  # noqa: E402
from app.ai.types import AIClientError, ChatMessage  # noqa: E402


def _fake_openai(content=None, error=None):
    create = AsyncMock()
    if error is not None:
        create.side_effect = error
    else:
        choice = SimpleNamespace(message=SimpleNamespace(content=content))
        create.return_value = SimpleNamespace(choices=[choice])
    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create))), create


class OpenAICompatibleProviderTests(unittest.IsolatedAsyncioTestCase):
    async def test_request_is_clamped_and_truncated(self):
        client, create = _fake_openai('{"ok": true}')
        provider = OpenAICompatibleProvider(model="test-model", client=client)

        result = await provider.complete(
            [ChatMessage(role="user", content="x" * 20_000), ChatMessage(role="system", content="   ")],
            json_mode=True,
            temperature=0.9,
            max_tokens=5000,
        )

        self.assertEqual(result, '{"ok": true}')
        kwargs = create.await_args.kwargs
        self.assertEqual(kwargs["model"], "test-model")
        self.assertEqual(len(kwargs["messages"]), 1)
        self.assertEqual(len(kwargs["messages"][0]["content"]), 12_000)
        self.assertEqual(kwargs["temperature"], 0.5)
        self.assertEqual(kwargs["max_tokens"], 2000)
        self.assertEqual(kwargs["response_format"], {"type": "json_object"})

    async def test_low_values_are_raised_to_minimums(self):
        client, create = _fake_openai("hello")
        provider = OpenAICompatibleProvider(model="m", client=client)
        await provider.complete([ChatMessage(role="user", content="hi")], temperature=0.0, max_tokens=10)

        kwargs = create.await_args.kwargs
        self.assertEqual(kwargs["temperature"], 0.3)
        self.assertEqual(kwargs["max_tokens"], 100)
        self.assertNotIn("response_format", kwargs)

    async def test_empty_messages_rejected(self):
        client, create = _fake_openai("unused")
        provider = OpenAICompatibleProvider(model="m", client=client)
        with self.assertRaises(AIClientError) as ctx:
            await provider.complete([ChatMessage(role="user", content="  ")])
        self.assertEqual(ctx.exception.code, "llm_invalid_request")
        create.assert_not_awaited()

    async def test_empty_response_is_an_error(self):
        client, _ = _fake_openai("")
        provider = OpenAICompatibleProvider(model="m", client=client)
        with self.assertRaises(AIClientError) as ctx:
            await provider.complete([ChatMessage(role="user", content="hi")])
        self.assertEqual(ctx.exception.code, "llm_empty")

    async def test_transport_errors_are_wrapped(self):
        client, _ = _fake_openai(error=ConnectionError("reset"))
        provider = OpenAICompatibleProvider(model="m", client=client)
        with self.assertRaises(AIClientError) as ctx:
            await provider.complete([ChatMessage(role="user", content="hi")])
        self.assertEqual(ctx.exception.code, "llm_exception")
        self.assertIsInstance(ctx.exception.__cause__, ConnectionError)

    def test_missing_key_without_client(self):
        with self.assertRaises(AIClientError) as ctx:
            OpenAICompatibleProvider(model="m", api_key="  ")
        self.assertEqual(ctx.exception.code, "llm_disabled")


class AIConfigAndFactoryTests(unittest.TestCase):
    def test_no_key_disables_client(self):
        with patch.dict(os.environ, {"AI_PROVIDER": "openrouter", "OPENROUTER_API_KEY": ""}):
            self.assertIsNone(build_ai_client())

    def test_placeholder_key_counts_as_missing(self):
        with patch.dict(os.environ, {"AI_PROVIDER": "openrouter", "OPENROUTER_API_KEY": "your_openrouter_key"}):
            cfg = load_ai_config()
        self.assertFalse(cfg.has_api_key)
        self.assertIsNone(build_ai_client(cfg))

    def test_openrouter_client_with_attribution_headers(self):
        env = {
            "AI_PROVIDER": "openrouter",
            "OPENROUTER_API_KEY": "sk-or-test",
            "AI_MODEL": "",
            "OPENROUTER_SITE_URL": "https://resumeiq.example",
            "OPENROUTER_APP_NAME": "ResumeIQ",
        }
        with patch.dict(os.environ, env):
            cfg = load_ai_config()
            client = build_ai_client(cfg)

        self.assertEqual(cfg.base_url, "https://openrouter.ai/api/v1")
        self.assertIsInstance(client, OpenAICompatibleProvider)
        self.assertEqual(client.model, "mistralai/mistral-small-3.1-24b-instruct:free")
        headers = client._client.default_headers
        self.assertEqual(headers["HTTP-Referer"], "https://resumeiq.example")
        self.assertEqual(headers["X-Title"], "ResumeIQ")

    def test_sdk_retries_are_always_disabled(self):
        env = {"AI_PROVIDER": "openai", "OPENAI_API_KEY": "sk-test", "AI_MAX_RETRIES": "5"}
        with patch.dict(os.environ, env):
            client = build_ai_client()

        self.assertIsInstance(client, OpenAICompatibleProvider)
        self.assertEqual(client._client.max_retries, 0)

    def test_timeout_is_clamped(self):
        with patch.dict(os.environ, {"AI_PROVIDER": "gemini", "AI_TIMEOUT_S": "600"}):
            cfg = load_ai_config()
        self.assertEqual(cfg.timeout_s, 60.0)
        self.assertEqual(cfg.model, os.environ.get("AI_MODEL") or "gemini-2.0-flash")

    def test_unsupported_provider(self):
        with patch.dict(os.environ, {"AI_PROVIDER": "carrier-pigeon"}):
            with self.assertRaises(ValueError):
                load_ai_config()


if __name__ == "__main__":
    unittest.main()
