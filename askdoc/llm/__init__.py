"""LLM access package.

Architectural role:
    Provides provider configuration, client construction, and the HTTP
    transport used to request chat completions.

Module split:
    - `provider_config`: environment-driven provider and model configuration.
    - `service`: builds the process-wide `CompletionClient`.
    - `client`: HTTP transport and response parsing.
"""
