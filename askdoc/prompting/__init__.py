"""Prompting package.

Deterministic message-construction helpers used by the core pipeline. It does
not perform extraction, validation, or model invocation.
"""
