"""Prompt-to-project scaffold builder."""

__version__ = "0.1.0"
