"""Prompt Builder: semantic field catalog, prompt-block compiler, and label formatter."""
from __future__ import annotations

from .compiler import build_chunks, generate_block_prompt
from .fields import format_semantic_key
from .models import BlockSet, Library, PromptBlock, PromptChunks, SemanticBlocks

__all__ = [
    "BlockSet",
    "Library",
    "PromptBlock",
    "PromptChunks",
    "SemanticBlocks",
    "build_chunks",
    "format_semantic_key",
    "generate_block_prompt",
]
