"""askdoc API adapter package.

Architectural role:
- Defines the external interaction boundary for HTTP and CLI interfaces.
- Performs transport-level parsing, validation and response shaping.
- Delegates the extraction/prompting/completion pipeline to `askdoc.core`.
"""
