"""Prompt templates for the generation providers."""

from .loader import render

__all__ = ["render"]
