"""citysim-director - LLM planner integration for the city simulation."""

from citysim_director.client import (
    LLMClient,
    LLMError,
    MockClient,
    OpenAICompatibleClient,
    validate_endpoint,
)
from citysim_director.config import DirectorConfig
from citysim_director.parsers import (
    DirectorResponseError,
    parse_director_response,
    strip_code_fences,
)
from citysim_director.prompt import SYSTEM_PROMPT, build_user_message
from citysim_director.systems import DirectorSystem, make_director_system

__all__ = [
    "LLMClient",
    "LLMError",
    "MockClient",
    "OpenAICompatibleClient",
    "validate_endpoint",
    "DirectorConfig",
    "DirectorResponseError",
    "parse_director_response",
    "strip_code_fences",
    "SYSTEM_PROMPT",
    "build_user_message",
    "DirectorSystem",
    "make_director_system",
]
