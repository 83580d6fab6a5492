#!/usr/bin/env python3
"""
Unit tests for the Gemini modernization client
"""

import unittest
from unittest.mock import MagicMock, Mock, patch

from plainverse.core.exceptions import ServiceError, TransientServiceError
from plainverse.core.llm_client import GeminiModernizer, classify_service_error
from plainverse.core.prompts import SYSTEM_INSTRUCTION, build_verse_prompt
from plainverse.core.transformer import VerseContext


class ResourceExhausted(Exception):
    pass


class TestClassifyServiceError(unittest.TestCase):

    def test_rate_limit_by_message(self):
        error = classify_service_error(Exception("429 Too Many Requests"))
        self.assertIsInstance(error, TransientServiceError)

    def test_quota_by_type_name(self):
        error = classify_service_error(ResourceExhausted("out of tokens"))
        self.assertIsInstance(error, TransientServiceError)
        self.assertIn("ResourceExhausted", str(error))

    def test_server_errors_are_transient(self):
        for message in ("503 Service Unavailable", "Deadline exceeded", "500 internal"):
            self.assertIsInstance(classify_service_error(Exception(message)), TransientServiceError)

    def test_other_errors_are_terminal(self):
        error = classify_service_error(ValueError("invalid argument"))
        self.assertIsInstance(error, ServiceError)
        self.assertNotIsInstance(error, TransientServiceError)


class TestPrompts(unittest.TestCase):

    def test_prompt_contains_only_the_verse(self):
        prompt = build_verse_prompt("I will go and do.", book="1 Nephi", chapter=3, verse=7)
        self.assertIn("(1 Nephi 3:7)", prompt)
        self.assertIn('"I will go and do."', prompt)

    def test_prompt_without_reference(self):
        prompt = build_verse_prompt("I will go.")
        self.assertNotIn("(", prompt)


class TestGeminiModernizer(unittest.TestCase):

    def setUp(self):
        patcher = patch('plainverse.core.llm_client.genai')
        self.mock_genai = patcher.start()
        self.addCleanup(patcher.stop)
        self.mock_model = MagicMock()
        self.mock_genai.GenerativeModel.return_value = self.mock_model

    def make_client(self):
        return GeminiModernizer(api_key="test-key", model_name="gemini-test")

    def test_requires_api_key(self):
        with patch.dict('os.environ', {}, clear=True):
            with self.assertRaises(ValueError):
                GeminiModernizer()

    def test_configures_model(self):
        self.make_client()

        self.mock_genai.configure.assert_called_once_with(api_key="test-key")
        kwargs = self.mock_genai.GenerativeModel.call_args.kwargs
        self.assertEqual(kwargs['model_name'], "gemini-test")
        self.assertEqual(kwargs['system_instruction'], SYSTEM_INSTRUCTION)

    def test_modernize_returns_text(self):
        self.mock_model.generate_content.return_value = Mock(text="I will go and do.")
        client = self.make_client()

        result = client.modernize("I will go and do.", VerseContext("1 Nephi", 3, 7))

        self.assertEqual(result, "I will go and do.")
        prompt = self.mock_model.generate_content.call_args.args[0]
        self.assertIn("1 Nephi 3:7", prompt)

    def test_rate_limit_is_transient(self):
        self.mock_model.generate_content.side_effect = Exception("429 Resource has been exhausted")
        client = self.make_client()

        with self.assertRaises(TransientServiceError):
            client.modernize("Go.")

    def test_empty_response_is_service_error(self):
        self.mock_model.generate_content.return_value = Mock(text="", candidates=[])
        client = self.make_client()

        with self.assertRaises(ServiceError):
            client.modernize("Go.")


if __name__ == '__main__':
    unittest.main()
