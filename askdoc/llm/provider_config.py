"""Provider/runtime configuration for the LLM layer.

Architectural role:
    Centralizes model/provider selection and credential lookup for
    `askdoc.llm.service` and `askdoc.llm.client`.

Model selection:
    - `MODEL_NAME` answers document questions (HTTP mode).
    - `CHAT_MODEL_NAME` is the lower-tier model used by the interactive session.

Determinism:
    Deterministic for a fixed process environment and key files. Values are
    resolved at import time (plus runtime key-file reads in `load_key`).

Failure behavior:
    Missing key material is represented as `None`; `service` decides whether
    that is fatal for the selected provider.
"""

import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

# Primary model routing controls.
PROVIDER = os.getenv("PROVIDER", "openai")
MODEL_NAME = os.getenv("MODEL_NAME", "gpt-4o")
CHAT_MODEL_NAME = os.getenv("CHAT_MODEL_NAME", "gpt-3.5-turbo")

# Unset means requests wait for the upstream without a client-side deadline.
_timeout = os.getenv("LLM_TIMEOUT_SECONDS", "").strip()
REQUEST_TIMEOUT_SECONDS: Optional[float] = float(_timeout) if _timeout else None

# OpenAI-compatible chat-completions endpoints.
PROVIDERS = {

    "local": {
        "url": os.getenv("LOCAL_LLM_URL", "http://127.0.0.1:8080/v1/chat/completions"),
        "key_file": None
    },

    "openai": {
        "url": "https://api.openai.com/v1/chat/completions",
        "key_file": "config/openai.key"
    },

    "groq": {
        "url": "https://api.groq.com/openai/v1/chat/completions",
        "key_file": "config/groq.key"
    },

    "together": {
        "url": "https://api.together.xyz/v1/chat/completions",
        "key_file": "config/together.key"
    },

    "openrouter": {
        "url": "https://openrouter.ai/api/v1/chat/completions",
        "key_file": "config/openrouter.key"
    },

    "mistral": {
        "url": "https://api.mistral.ai/v1/chat/completions",
        "key_file": "config/mistral.key"
    },

    "deepinfra": {
        "url": "https://api.deepinfra.com/v1/openai/chat/completions",
        "key_file": "config/deepinfra.key"
    },

    "fireworks": {
        "url": "https://api.fireworks.ai/inference/v1/chat/completions",
        "key_file": "config/fireworks.key"
    },

}


def load_key(path):
    """Load API key from environment override or key file.

    Resolution order:
        1. Environment variable inferred from file stem (for example
           `config/openai.key` -> `OPENAI_API_KEY`).
        2. Raw file contents at `path`.

    Edge cases:
        - `None` path returns `None`.
        - Missing file returns `None`.
    """
    if not path:
        return None
    key_name = os.path.splitext(os.path.basename(path))[0].upper() + "_API_KEY"
    env_value = os.getenv(key_name)
    if env_value:
        return env_value
    if not os.path.exists(path):
        return None
    with open(path, "r") as f:
        return f.read().strip()
