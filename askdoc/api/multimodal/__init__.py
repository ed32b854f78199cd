"""Multimodal preprocessing package for API adapters.

Architectural role:
- Converts uploaded files into prompt content (text or base64 images).
- Owns the scratch directory where uploads live for one request.

Scope:
- Content preprocessing and transient storage only; no HTTP endpoint definitions.
"""
