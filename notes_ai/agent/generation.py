"""Agno-backed generation client for the tutor gateway.

Wraps an Agno ``Agent`` behind a single ``generate(prompt)`` call.

Architecture decisions:

1. **No storage** - Every gateway request carries its own context (notes,
   file, question), so the agent is created without a database and never
   adds history. Concurrent requests share nothing but the model client.

2. **Singleton Pattern** - Model client construction reads config and opens
   HTTP connection pools, so one instance is reused across requests.

3. **Service Wrapper** - Decouples the gateway from Agno's interface and turns
   every backend fault into a single ``GenerationError``. No retries: a failed
   call surfaces immediately.
"""

import logging

from agno.agent import Agent
from agno.models.google import Gemini
from agno.models.openai import OpenAIChat

from notes_ai.agent.config import AgentConfig, get_agent_config
from notes_ai.agent.prompt import PromptBudget, assemble, load_template
from notes_ai.models.schemas import GenerationRequest

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """Raised when the generation backend fails or returns nothing."""

    pass


class GenerationClient:
    """Stateless client for the text-generation backend."""

    def __init__(self, config: AgentConfig | None = None) -> None:
        """Initialize the generation client.

        Args:
            config: Optional agent configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_agent_config()
        self._agent = self._create_agent()

    def _create_model(self) -> Gemini | OpenAIChat:
        if self._config.provider == "openai":
            return OpenAIChat(
                id=self._config.model_name,
                api_key=self._config.api_key,
                base_url=self._config.base_url,
                temperature=self._config.temperature,
                max_tokens=self._config.max_tokens,
            )
        return Gemini(
            id=self._config.model_name,
            api_key=self._config.api_key,
            temperature=self._config.temperature,
            max_output_tokens=self._config.max_tokens,
        )

    def _create_agent(self) -> Agent:
        """Create the Agno agent instance.

        The assembled prompt already holds the persona and all context, so
        the agent gets no description, instructions, storage or history.
        """
        return Agent(
            model=self._create_model(),
            add_history_to_context=False,
            # Output as markdown for rich formatting in UI
            markdown=True,
        )

    @property
    def config(self) -> AgentConfig:
        return self._config

    async def generate(self, prompt: str) -> str:
        """Generate the tutor's answer for a fully assembled prompt.

        Args:
            prompt: Prompt text from the prompt assembler.

        Returns:
            Generated answer text.

        Raises:
            GenerationError: On any backend fault or an empty answer.
        """
        try:
            response = await self._agent.arun(prompt)
        except Exception as e:
            raise GenerationError(f"Generation backend call failed: {e}") from e

        status = getattr(response, "status", None)
        if str(getattr(status, "value", status)).lower() == "error":
            raise GenerationError(f"Generation run ended with error: {response.content}")

        content = getattr(response, "content", None)
        if not isinstance(content, str) or not content.strip():
            raise GenerationError("Generation backend returned an empty response")
        return content


async def answer_query(
    request: GenerationRequest,
    client: GenerationClient,
    budget: PromptBudget | None = None,
) -> str:
    """Assemble the prompt for a request and generate the answer.

    Args:
        request: Template, context and query for this call.
        client: Generation client to call.
        budget: Optional prompt size budget.

    Returns:
        Generated answer text.
    """
    prompt = assemble(
        request.instruction_template,
        request.notes_context,
        request.file_context,
        request.query,
        budget=budget,
    )
    logger.debug(f"Assembled prompt of {len(prompt)} chars")
    return await client.generate(prompt)


# Module-level singletons
_generation_client: GenerationClient | None = None
_template: str | None = None


def get_generation_client() -> GenerationClient:
    """Get or create the global generation client.

    Returns:
        The GenerationClient instance.
    """
    global _generation_client
    if _generation_client is None:
        _generation_client = GenerationClient()
    return _generation_client


def get_template() -> str:
    """Load the instruction template once, using the configured path.

    Returns:
        Template text.
    """
    global _template
    if _template is None:
        _template = load_template(get_generation_client().config.template_path)
    return _template
