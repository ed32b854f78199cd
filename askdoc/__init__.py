"""askdoc: ask a language model questions about uploaded documents."""

__version__ = "0.1.0"
