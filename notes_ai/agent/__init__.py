"""Server-side prompt pipeline.

Builds the tutor prompt and calls the generation backend through Agno.

Responsibilities:
    - Backend configuration (Gemini or OpenAI-compatible models)
    - Instruction template loading and prompt assembly
    - Size budgeting of the notes and uploaded file
    - Stateless text generation with error normalization

Maintains clean separation from the HTTP layer.
"""

from notes_ai.agent.config import AgentConfig, get_agent_config
from notes_ai.agent.generation import (
    GenerationClient,
    GenerationError,
    answer_query,
    get_generation_client,
)
from notes_ai.agent.prompt import PromptBudget, PromptTemplateError, assemble, load_template

__all__ = [
    "AgentConfig",
    "GenerationClient",
    "GenerationError",
    "PromptBudget",
    "PromptTemplateError",
    "answer_query",
    "assemble",
    "get_agent_config",
    "get_generation_client",
    "load_template",
]
