"""Completion-client construction from provider configuration.

Architectural role:
    Builds the single `CompletionClient` a process uses. Process startup
    (FastAPI lifespan or the CLI entrypoint) calls `create_completion_client`
    once and injects the result into the request handler or session.

Failure scenarios:
    - Unknown `PROVIDER` -> `RuntimeError`.
    - Provider requires a key and none is found -> `RuntimeError`.
"""

from typing import Optional

from askdoc.llm.client import CompletionClient
from askdoc.llm.provider_config import (
    PROVIDER,
    PROVIDERS,
    REQUEST_TIMEOUT_SECONDS,
    load_key,
)


def create_completion_client(
    provider: Optional[str] = None,
    timeout: Optional[float] = REQUEST_TIMEOUT_SECONDS,
) -> CompletionClient:
    """Return a client for `provider` (defaults to the configured `PROVIDER`)."""
    provider = provider or PROVIDER

    config = PROVIDERS.get(provider)
    if config is None:
        raise RuntimeError(f"Unknown LLM provider: {provider}")

    api_key = None
    key_file = config["key_file"]
    if key_file:
        api_key = load_key(key_file)
        if not api_key:
            raise RuntimeError(f"{provider.upper()} API key not found")

    return CompletionClient(config["url"], api_key=api_key, timeout=timeout)
