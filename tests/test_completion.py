import unittest
from unittest.mock import patch, MagicMock
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from event_interpretation.prompts import INTERPRETATION_PROMPT, ModelConfig, PromptConfig
from event_interpretation.services import request_completion


def _completion_response(content):
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    return response


class TestRequestCompletion(unittest.TestCase):

    @patch('event_interpretation.services.completion.get_openai')
    def test_sends_system_and_user_messages(self, mock_get_openai):
        mock_client = mock_get_openai.return_value
        mock_client.chat.completions.create.return_value = _completion_response('{"interpretation": "x"}')

        content = request_completion(INTERPRETATION_PROMPT, '{"event": {}}')

        self.assertEqual(content, '{"interpretation": "x"}')
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs["model"], INTERPRETATION_PROMPT.model.model)
        self.assertEqual(kwargs["temperature"], INTERPRETATION_PROMPT.model.temperature)
        self.assertEqual(kwargs["response_format"], {"type": "json_object"})
        self.assertEqual(
            kwargs["messages"],
            [
                {"role": "system", "content": INTERPRETATION_PROMPT.system_prompt},
                {"role": "user", "content": '{"event": {}}'},
            ],
        )
        self.assertNotIn("max_tokens", kwargs)

    @patch('event_interpretation.services.completion.get_openai')
    def test_defaults_response_format_and_passes_max_tokens(self, mock_get_openai):
        prompt = PromptConfig(
            id="test",
            name="Test",
            description="Test prompt",
            system_prompt="Reply in JSON.",
            model=ModelConfig(model="gpt-4o-mini", temperature=0.0, max_tokens=500),
        )
        mock_client = mock_get_openai.return_value
        mock_client.chat.completions.create.return_value = _completion_response("{}")

        request_completion(prompt, "hello")

        kwargs = mock_client.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs["response_format"], {"type": "json_object"})
        self.assertEqual(kwargs["max_tokens"], 500)

    @patch('event_interpretation.services.completion.get_openai')
    def test_no_choices_returns_none(self, mock_get_openai):
        response = MagicMock()
        response.choices = []
        mock_get_openai.return_value.chat.completions.create.return_value = response

        self.assertIsNone(request_completion(INTERPRETATION_PROMPT, "hello"))

    @patch('event_interpretation.services.completion.get_openai')
    def test_null_content_returns_none(self, mock_get_openai):
        mock_get_openai.return_value.chat.completions.create.return_value = _completion_response(None)

        self.assertIsNone(request_completion(INTERPRETATION_PROMPT, "hello"))


if __name__ == '__main__':
    unittest.main()
