"""Protocol definitions for payloadbench.

These protocols define the narrow interfaces of the external collaborators
(model API client, compact-notation encoder, dataset loader), enabling
dependency injection and easier testing.

Note: ``contents`` and ``config`` use ``Any`` because they are passed through
to the model SDK untouched. The protocols define the interface contract, not
the SDK types.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class GenerationResult:
    """What the trial runner needs back from a generation call."""

    text: str
    prompt_token_count: int | None = None
    total_token_count: int | None = None
    raw: Any = None


@runtime_checkable
class ModelClient(Protocol):
    """Protocol for the model API client."""

    async def count_tokens(self, model: str, contents: Any) -> int:
        """Count the tokens of a request before submitting it.

        Args:
            model: Model identifier.
            contents: Request contents.

        Returns:
            Total token count (0 when the API reports none).
        """
        ...

    async def generate_content(self, model: str, contents: Any, config: Any) -> GenerationResult:
        """Submit a generation request.

        Args:
            model: Model identifier.
            contents: Request contents.
            config: Generation config (temperature, top_p, ...).

        Returns:
            Response text, usage token counts and the raw response.
        """
        ...


@runtime_checkable
class NotationEncoder(Protocol):
    """Protocol for the compact token-oriented notation encoder."""

    def __call__(self, value: Any) -> str: ...


@runtime_checkable
class DatasetLoader(Protocol):
    """Protocol for loading the benchmark dataset."""

    def __call__(self, path: Path) -> Any: ...
