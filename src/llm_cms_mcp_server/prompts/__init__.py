"""MCP prompt templates."""

from .base import PromptParameter, PromptTemplate
from .templates import default_prompts

__all__ = ["PromptParameter", "PromptTemplate", "default_prompts"]
