"""Director configuration dataclass."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

DEFAULT_BASE_URL = "https://api.cerebras.ai/v1"
DEFAULT_MODEL = "gpt-oss-120b"


@dataclass(frozen=True)
class DirectorConfig:
    """Immutable configuration for the Director layer.

    Attributes:
        base_url: OpenAI-compatible API root.
        model: Model name sent with each request.
        api_key: Bearer token; empty disables the HTTP client.
        interval_ticks: Ticks between planner queries. The first query goes
            out on the first tick.
        query_timeout: Seconds before an outstanding query is abandoned.
        temperature: Sampling temperature for the planner.
        max_tokens: Completion budget per query.
        max_agents: Agents included in the prompt's world summary.
        max_roads: Non-open roads included in the summary.
        max_events: Most recent events included in the summary.
        max_assets: Assets included in the summary.
    """

    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    api_key: str = ""
    interval_ticks: int = 50
    query_timeout: float = 30.0
    temperature: float = 0.7
    max_tokens: int = 2000
    max_agents: int = 60
    max_roads: int = 40
    max_events: int = 20
    max_assets: int = 20

    def __post_init__(self) -> None:
        if self.interval_ticks <= 0:
            raise ValueError("interval_ticks must be positive")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> DirectorConfig:
        """Build a config from ``CITYSIM_DIRECTOR_*`` environment variables."""
        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {}
        if env.get("CITYSIM_DIRECTOR_BASE_URL"):
            kwargs["base_url"] = env["CITYSIM_DIRECTOR_BASE_URL"]
        if env.get("CITYSIM_DIRECTOR_MODEL"):
            kwargs["model"] = env["CITYSIM_DIRECTOR_MODEL"]
        if env.get("CITYSIM_DIRECTOR_API_KEY"):
            kwargs["api_key"] = env["CITYSIM_DIRECTOR_API_KEY"]
        if env.get("CITYSIM_DIRECTOR_INTERVAL"):
            kwargs["interval_ticks"] = int(env["CITYSIM_DIRECTOR_INTERVAL"])
        return cls(**kwargs)  # type: ignore[arg-type]
