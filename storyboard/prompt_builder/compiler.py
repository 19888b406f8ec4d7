"""Prompt Builder compiler utilities.

Assembles a single natural-language prompt from a library of reusable character
and location templates plus a per-shot override set. The compiler is a total
function: unresolved template ids and absent fields degrade to empty text.
"""

from __future__ import annotations

import re
from typing import Iterable, Mapping, Tuple, Union

from .fields import CHARACTER_BASE, DESCRIPTIVE_CHUNKS, LOCATION_BASE, PARAMETER_CHUNK
from .models import Library, PromptBlock, PromptChunks, SemanticBlocks

LibraryLike = Union[Library, Mapping]
PromptBlockLike = Union[PromptBlock, Mapping]

_MULTI_SPACE = re.compile(r"  +")


def _as_library(library: object) -> Library:
    if isinstance(library, Library):
        return library
    return Library.from_dict(library)


def _as_prompt_block(prompt_block: object) -> PromptBlock:
    if isinstance(prompt_block, PromptBlock):
        return prompt_block
    return PromptBlock.from_dict(prompt_block)


def _lookup(key: str, base: SemanticBlocks, override: SemanticBlocks) -> str:
    value = override.get(key)
    if isinstance(value, str) and value:
        return value
    value = base.get(key)
    if isinstance(value, str) and value:
        return value
    return ""


def _join_chunk(
    layout: Iterable[Tuple[str, str]],
    bases: Mapping[str, SemanticBlocks],
    override: SemanticBlocks,
    separator: str,
) -> str:
    values = [_lookup(key, bases[base], override) for key, base in layout]
    return separator.join(value for value in values if value)


def _tidy(text: str) -> str:
    text = text.replace(" ,", ",")
    text = _MULTI_SPACE.sub(" ", text)
    text = text.replace(". .", ".")
    return text.strip()


def build_chunks(library: LibraryLike, prompt_block: PromptBlockLike) -> PromptChunks:
    """Resolve templates and overrides into the five ordered prompt chunks."""

    library = _as_library(library)
    prompt_block = _as_prompt_block(prompt_block)
    override = prompt_block.override or {}
    bases = {
        CHARACTER_BASE: library.character_blocks(prompt_block.base_character_id) or {},
        LOCATION_BASE: library.location_blocks(prompt_block.base_location_id) or {},
    }

    descriptive = {name: _join_chunk(layout, bases, override, ", ") for name, layout in DESCRIPTIVE_CHUNKS.items()}
    return PromptChunks(
        parameters=_join_chunk(PARAMETER_CHUNK, bases, override, " "),
        **descriptive,
    )


def render_chunks(chunks: PromptChunks) -> str:
    """Join chunk texts into the final prompt.

    Descriptive chunks are separated by ``". "`` and closed with a period; model
    parameters follow after a space, or stand alone when nothing else is set.
    """

    descriptive = ". ".join(chunks.descriptive())
    if chunks.parameters:
        if not descriptive:
            return _tidy(chunks.parameters)
        return _tidy(f"{descriptive}. {chunks.parameters}")

    text = _tidy(descriptive)
    if text and not text.endswith("."):
        text += "."
    return text


def generate_block_prompt(library: LibraryLike, prompt_block: PromptBlockLike) -> str:
    """Compile a PromptBlock against a Library into a single prompt string."""

    return render_chunks(build_chunks(library, prompt_block))
