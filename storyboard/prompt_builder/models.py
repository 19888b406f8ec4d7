"""Shared data models for the Prompt Builder module.

- Purpose: define serializable structures for semantic blocks, library templates, and per-shot prompt blocks.
- Assumptions: payloads come from user-edited project JSON and may be partial or contain stray types.
- Side effects: none; classes are passive containers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

SemanticBlocks = Dict[str, str]


def parse_semantic_blocks(payload: object) -> SemanticBlocks:
    """Coerce a raw mapping into SemanticBlocks, dropping non-string values."""

    if not isinstance(payload, Mapping):
        return {}
    return {str(key): value for key, value in payload.items() if isinstance(value, str)}


@dataclass
class BlockSet:
    name: str = ""
    blocks: SemanticBlocks = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return {"name": self.name, "blocks": dict(self.blocks)}

    @classmethod
    def from_dict(cls, payload: object) -> "BlockSet":
        if not isinstance(payload, Mapping):
            return cls()
        name = payload.get("name")
        return cls(name=name if isinstance(name, str) else "", blocks=parse_semantic_blocks(payload.get("blocks")))


def _parse_block_sets(payload: object) -> Dict[str, BlockSet]:
    if not isinstance(payload, Mapping):
        return {}
    return {str(key): BlockSet.from_dict(value) for key, value in payload.items()}


@dataclass
class Library:
    """Project-wide catalog of reusable character, location, and prop templates."""

    characters: Dict[str, BlockSet] = field(default_factory=dict)
    locations: Dict[str, BlockSet] = field(default_factory=dict)
    props: Dict[str, BlockSet] = field(default_factory=dict)

    def character_blocks(self, character_id: Optional[str]) -> SemanticBlocks:
        entry = self.characters.get(character_id) if character_id else None
        return entry.blocks if entry else {}

    def location_blocks(self, location_id: Optional[str]) -> SemanticBlocks:
        entry = self.locations.get(location_id) if location_id else None
        return entry.blocks if entry else {}

    def to_dict(self) -> Dict[str, object]:
        return {
            "characters": {key: value.to_dict() for key, value in self.characters.items()},
            "locations": {key: value.to_dict() for key, value in self.locations.items()},
            "props": {key: value.to_dict() for key, value in self.props.items()},
        }

    @classmethod
    def from_dict(cls, payload: object) -> "Library":
        if not isinstance(payload, Mapping):
            return cls()
        return cls(
            characters=_parse_block_sets(payload.get("characters")),
            locations=_parse_block_sets(payload.get("locations")),
            props=_parse_block_sets(payload.get("props")),
        )


@dataclass
class PromptBlock:
    """One shot's prompt configuration: two template references plus field overrides."""

    base_character_id: str = ""
    base_location_id: str = ""
    override: SemanticBlocks = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return {
            "base_character_id": self.base_character_id,
            "base_location_id": self.base_location_id,
            "override": dict(self.override),
        }

    @classmethod
    def from_dict(cls, payload: object) -> "PromptBlock":
        if not isinstance(payload, Mapping):
            return cls()
        character_id = payload.get("base_character_id")
        location_id = payload.get("base_location_id")
        return cls(
            base_character_id=character_id if isinstance(character_id, str) else "",
            base_location_id=location_id if isinstance(location_id, str) else "",
            override=parse_semantic_blocks(payload.get("override")),
        )


@dataclass
class PromptChunks:
    """Intermediate chunk texts produced while assembling a prompt."""

    style: str = ""
    camera: str = ""
    subject: str = ""
    background: str = ""
    parameters: str = ""

    def descriptive(self) -> List[str]:
        return [chunk for chunk in (self.style, self.camera, self.subject, self.background) if chunk]

    def to_dict(self) -> Dict[str, str]:
        return {
            "style": self.style,
            "camera": self.camera,
            "subject": self.subject,
            "background": self.background,
            "parameters": self.parameters,
        }
