"""Core request pipeline package.

Architectural role:
    Sits between the API/CLI adapters and the extraction, prompting and LLM
    layers.

Composition:
    - `engine`: validate -> extract -> assemble -> call pipeline for one request.
    - `content_types`: data contracts shared across layers.
    - `errors`: exception taxonomy and its HTTP status mapping.
"""
