"""
Unit tests for the Azure OpenAI text QC provider.
"""
import json
import unittest
from unittest.mock import Mock, patch

from openai import OpenAIError

from pdfqc.core.config import settings
from pdfqc.core.error_handling import ClientConfigurationError, TextAnalysisError
from pdfqc.models.text_issues import TextIssueType
from pdfqc.services.text_qc.llm_provider import LLMTextIssueProvider, parse_llm_issues


def completion(content):
    return Mock(choices=[Mock(message=Mock(content=content))])


class TestParseLLMIssues(unittest.TestCase):
    """Test cases for parse_llm_issues."""

    def test_plain_json_array(self):
        content = json.dumps([
            {"type": "spelling", "description": "Misspelled", "position": 3, "length": 8, "suggestion": "received"}
        ])
        issues = parse_llm_issues(content, 40)

        self.assertEqual(len(issues), 1)
        self.assertEqual(issues[0].type, TextIssueType.SPELLING)
        self.assertEqual((issues[0].start, issues[0].end), (3, 11))
        self.assertEqual(issues[0].suggestion, "received")

    def test_fenced_json(self):
        content = '```json\n[{"type": "style", "description": "Wordy", "position": 0, "length": 4}]\n```'
        issues = parse_llm_issues(content, 20)
        self.assertEqual([i.type for i in issues], [TextIssueType.STYLE])

    def test_punctuation_counts_as_grammar(self):
        content = '[{"type": "punctuation", "description": "Missing comma", "position": 2}]'
        issues = parse_llm_issues(content, 20)

        self.assertEqual(issues[0].type, TextIssueType.GRAMMAR)
        self.assertEqual((issues[0].start, issues[0].end), (2, 3))

    def test_malformed_items_dropped(self):
        content = json.dumps([
            {"type": "spelling", "description": "ok", "position": 1, "length": 2},
            {"type": "tone", "description": "unknown type", "position": 1},
            {"type": "grammar", "description": "no position"},
            {"type": "grammar", "description": "past the end", "position": 99},
            "not an object",
        ])
        issues = parse_llm_issues(content, 20)
        self.assertEqual([i.description for i in issues], ["ok"])

    def test_span_clipped_to_text(self):
        content = '[{"type": "grammar", "description": "Run-on", "position": 15, "length": 50}]'
        issues = parse_llm_issues(content, 20)
        self.assertEqual(issues[0].end, 20)

    def test_invalid_json_raises(self):
        with self.assertRaises(TextAnalysisError):
            parse_llm_issues("I found no problems.", 20)

    def test_non_array_raises(self):
        with self.assertRaises(TextAnalysisError):
            parse_llm_issues('{"issues": []}', 20)


class TestLLMTextIssueProvider(unittest.IsolatedAsyncioTestCase):
    """Test cases for LLMTextIssueProvider."""

    def setUp(self):
        self.client = Mock()
        self.provider = LLMTextIssueProvider(client=self.client, deployment="qc-deployment")

    async def test_provide_text_issues(self):
        self.client.chat.completions.create.return_value = completion(
            '[{"type": "spelling", "description": "Misspelled", "position": 3, "length": 8}]'
        )

        issues = await self.provider.provide_text_issues("We recieved it.")

        self.assertEqual(len(issues), 1)
        kwargs = self.client.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs["model"], "qc-deployment")
        self.assertEqual(kwargs["temperature"], 0.0)
        self.assertIn("We recieved it.", kwargs["messages"][1]["content"])

    async def test_long_text_truncated(self):
        self.client.chat.completions.create.return_value = completion("[]")

        with patch.object(settings, "TEXT_QC_MAX_CHARS", 10):
            await self.provider.provide_text_issues("0123456789ABCDEF")

        user_prompt = self.client.chat.completions.create.call_args.kwargs["messages"][1]["content"]
        self.assertIn("0123456789", user_prompt)
        self.assertNotIn("ABCDEF", user_prompt)

    async def test_api_error_raises_text_analysis_error(self):
        self.client.chat.completions.create.side_effect = OpenAIError("rate limited")
        with self.assertRaises(TextAnalysisError):
            await self.provider.provide_text_issues("Some text.")

    async def test_empty_response_raises(self):
        self.client.chat.completions.create.return_value = completion(None)
        with self.assertRaises(TextAnalysisError):
            await self.provider.provide_text_issues("Some text.")

    def test_missing_credentials(self):
        with self.assertRaises(ClientConfigurationError):
            LLMTextIssueProvider(api_key="", endpoint="")


if __name__ == '__main__':
    unittest.main()
