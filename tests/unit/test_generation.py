"""Unit tests for GenerationClient and answer_query.

The Agno agent and model classes are patched; no backend is contacted.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from notes_ai.agent.config import AgentConfig
from notes_ai.agent.generation import GenerationClient, GenerationError, answer_query
from notes_ai.agent.prompt import PromptBudget
from notes_ai.models.schemas import GenerationRequest


def make_client(mock_agent_class: MagicMock, response: object = None, error: Exception | None = None) -> GenerationClient:
    agent = mock_agent_class.return_value
    agent.arun = AsyncMock(return_value=response, side_effect=error)
    return GenerationClient(config=AgentConfig(provider="gemini", api_key="test-key"))


class TestGenerationClientInit:
    """Tests for model selection."""

    @patch("notes_ai.agent.generation.Gemini")
    @patch("notes_ai.agent.generation.Agent")
    def test_gemini_model_from_config(
        self, mock_agent_class: MagicMock, mock_gemini: MagicMock
    ) -> None:
        """Gemini provider builds an Agno Gemini model with config values."""
        config = AgentConfig(
            provider="gemini", api_key="g-key", temperature=0.2, max_tokens=512, model_name=""
        )

        GenerationClient(config=config)

        mock_gemini.assert_called_once_with(
            id="gemini-2.0-flash",
            api_key="g-key",
            temperature=0.2,
            max_output_tokens=512,
        )
        assert mock_agent_class.call_args.kwargs["model"] is mock_gemini.return_value

    @patch("notes_ai.agent.generation.OpenAIChat")
    @patch("notes_ai.agent.generation.Agent")
    def test_openai_model_from_config(
        self, mock_agent_class: MagicMock, mock_openai_chat: MagicMock
    ) -> None:
        """OpenAI provider passes the custom base URL through."""
        config = AgentConfig(
            provider="openai",
            api_key="sk-key",
            base_url="http://localhost:11434/v1",
            model_name="gpt-4o",
            temperature=0.3,
            max_tokens=4096,
        )

        GenerationClient(config=config)

        mock_openai_chat.assert_called_once_with(
            id="gpt-4o",
            api_key="sk-key",
            base_url="http://localhost:11434/v1",
            temperature=0.3,
            max_tokens=4096,
        )

    @patch("notes_ai.agent.generation.Gemini")
    @patch("notes_ai.agent.generation.Agent")
    def test_agent_has_no_history(
        self, mock_agent_class: MagicMock, mock_gemini: MagicMock
    ) -> None:
        """Agent is created without storage or history."""
        GenerationClient(config=AgentConfig(api_key="k", provider="gemini"))

        call_kwargs = mock_agent_class.call_args.kwargs
        assert call_kwargs["add_history_to_context"] is False
        assert "db" not in call_kwargs
        assert call_kwargs["markdown"] is True


@patch("notes_ai.agent.generation.Gemini", MagicMock())
class TestGenerate:
    """Tests for generate() error normalization."""

    @patch("notes_ai.agent.generation.Agent")
    async def test_returns_content(self, mock_agent_class: MagicMock) -> None:
        client = make_client(mock_agent_class, SimpleNamespace(content="Answer", status=None))

        assert await client.generate("prompt") == "Answer"
        mock_agent_class.return_value.arun.assert_awaited_once_with("prompt")

    @patch("notes_ai.agent.generation.Agent")
    async def test_backend_exception_becomes_generation_error(
        self, mock_agent_class: MagicMock
    ) -> None:
        client = make_client(mock_agent_class, error=RuntimeError("quota exceeded"))

        with pytest.raises(GenerationError) as exc_info:
            await client.generate("prompt")

        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.parametrize("content", [None, "", "   "])
    @patch("notes_ai.agent.generation.Agent")
    async def test_empty_content_is_an_error(
        self, mock_agent_class: MagicMock, content: str | None
    ) -> None:
        client = make_client(mock_agent_class, SimpleNamespace(content=content, status=None))

        with pytest.raises(GenerationError, match="empty"):
            await client.generate("prompt")

    @patch("notes_ai.agent.generation.Agent")
    async def test_error_status_is_an_error(self, mock_agent_class: MagicMock) -> None:
        status = SimpleNamespace(value="ERROR")
        client = make_client(mock_agent_class, SimpleNamespace(content="boom", status=status))

        with pytest.raises(GenerationError, match="error"):
            await client.generate("prompt")


class TestAnswerQuery:
    """Tests for the assemble-then-generate glue."""

    async def test_generates_from_assembled_prompt(self) -> None:
        client = MagicMock()
        client.generate = AsyncMock(return_value="Because.")
        request = GenerationRequest(
            instruction_template="N={{notes_context}} F={{file_context}}",
            notes_context="notes",
            file_context=None,
            query="Why?",
        )

        answer = await answer_query(request, client, PromptBudget(max_chars=0))

        assert answer == "Because."
        prompt = client.generate.await_args.args[0]
        assert prompt.startswith("N=notes F=No file was uploaded.")
        assert "Student: Why?" in prompt
