"""Project document models.

- Purpose: describe the uploaded storyboard document (project info, scenario, library, scenes, frames).
- Assumptions: documents are hand-edited or LLM-generated JSON; any section may be missing or partial.
- Side effects: none; parsing never mutates the raw payload.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from storyboard.cache_store.keys import FRAME_TYPES
from storyboard.prompt_builder.models import Library, PromptBlock


class ProjectError(ValueError):
    """Raised when a project document cannot be loaded at all."""


def _text(value: object, default: str = "") -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


def _optional_text(value: object) -> Optional[str]:
    text = _text(value)
    return text or None


def _number(value: object) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _mapping(value: object) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


@dataclass
class Motion:
    ko: str = ""
    en: str = ""
    speed: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: object) -> Optional["Motion"]:
        if not isinstance(payload, Mapping):
            return None
        return cls(ko=_text(payload.get("ko")), en=_text(payload.get("en")), speed=_optional_text(payload.get("speed")))


@dataclass
class BlockFrame:
    """Current frame shape: the prompt is assembled from a PromptBlock."""

    prompt_block: PromptBlock
    shot_type: str = "block_based"
    duration: Optional[float] = None
    description: str = ""
    prompt: str = ""
    motion: Optional[Motion] = None
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    kind: str = field(default="block", init=False)

    @property
    def legacy_prompt(self) -> str:
        return self.prompt


@dataclass
class LegacyFrame:
    """Older frame shape carrying a flat prompt and a free-form prompt structure."""

    shot_type: Optional[str] = None
    duration: Optional[float] = None
    description: str = ""
    prompt_structure: Dict[str, Any] = field(default_factory=dict)
    prompt: str = ""
    parameters: str = ""
    motion: Optional[Motion] = None
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    kind: str = field(default="legacy", init=False)

    @property
    def legacy_prompt(self) -> str:
        return self.prompt


Frame = Union[BlockFrame, LegacyFrame]


def parse_frame(payload: object) -> Frame:
    """Classify a raw frame by the presence of a ``promptBlock`` mapping."""

    raw = _mapping(payload)
    common = {
        "duration": _number(raw.get("duration")),
        "description": _text(raw.get("description")),
        "prompt": _text(raw.get("prompt")),
        "motion": Motion.from_dict(raw.get("motion")),
        "image_url": _optional_text(raw.get("imageUrl")),
        "video_url": _optional_text(raw.get("videoUrl")),
    }
    if isinstance(raw.get("promptBlock"), Mapping):
        return BlockFrame(
            prompt_block=PromptBlock.from_dict(raw["promptBlock"]),
            shot_type=_text(raw.get("shotType"), "block_based"),
            **common,
        )
    return LegacyFrame(
        shot_type=_optional_text(raw.get("shotType")),
        prompt_structure=dict(_mapping(raw.get("promptStructure"))),
        parameters=_text(raw.get("parameters")),
        **common,
    )


@dataclass
class Setting:
    base_location_id: Optional[str] = None
    location: Optional[str] = None
    time_of_day: Optional[str] = None
    atmosphere: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: object) -> "Setting":
        raw = _mapping(payload)
        return cls(
            base_location_id=_optional_text(raw.get("base_location_id")),
            location=_optional_text(raw.get("location")),
            time_of_day=_optional_text(raw.get("timeOfDay")),
            atmosphere=_optional_text(raw.get("atmosphere")),
        )


@dataclass
class Transition:
    type: Optional[str] = None
    duration: Optional[float] = None


@dataclass
class Scene:
    number: int
    scene_id: str
    title: str = ""
    description: str = ""
    duration: Optional[float] = None
    setting: Setting = field(default_factory=Setting)
    frames: Dict[str, Frame] = field(default_factory=dict)
    frames_key: Optional[str] = None
    transition: Optional[Transition] = None

    def frame(self, frame_type: str) -> Optional[Frame]:
        return self.frames.get(frame_type)

    @classmethod
    def from_dict(cls, payload: object, index: int) -> "Scene":
        raw = _mapping(payload)
        scene_id = _text(raw.get("sceneId")) or _text(raw.get("id")) or f"scene_{index}"
        number = raw.get("scene") or raw.get("sceneNumber")
        if not isinstance(number, int) or isinstance(number, bool):
            number = index + 1

        frames_key = None
        for candidate in ("shots", "frames"):
            if isinstance(raw.get(candidate), Mapping):
                frames_key = candidate
                break
        frames: Dict[str, Frame] = {}
        if frames_key:
            source = raw[frames_key]
            for frame_type in FRAME_TYPES:
                if frame_type in source:
                    frames[frame_type] = parse_frame(source[frame_type])

        transition = None
        if isinstance(raw.get("transition"), Mapping):
            transition = Transition(
                type=_optional_text(raw["transition"].get("type")),
                duration=_number(raw["transition"].get("duration")),
            )

        return cls(
            number=number,
            scene_id=scene_id,
            title=_text(raw.get("title")),
            description=_text(raw.get("description")),
            duration=_number(raw.get("duration")),
            setting=Setting.from_dict(raw.get("setting")),
            frames=frames,
            frames_key=frames_key,
            transition=transition,
        )


@dataclass
class ProjectInfo:
    title: str = ""
    style: str = ""
    total_duration: Optional[str] = None
    aspect_ratio: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: object) -> "ProjectInfo":
        raw = _mapping(payload)
        return cls(
            title=_text(raw.get("title")),
            style=_text(raw.get("style")),
            total_duration=_optional_text(raw.get("totalDuration")),
            aspect_ratio=_optional_text(raw.get("aspectRatio")),
            description=_optional_text(raw.get("description")),
        )


@dataclass
class Scenario:
    title: str = ""
    summary: str = ""
    script: str = ""

    @classmethod
    def from_payload(cls, payload: object) -> "Scenario":
        # Older documents store the scenario as a bare string.
        if isinstance(payload, str):
            return cls(summary=payload)
        raw = _mapping(payload)
        return cls(title=_text(raw.get("title")), summary=_text(raw.get("summary")), script=_text(raw.get("script")))


@dataclass
class ProjectDocument:
    project: ProjectInfo = field(default_factory=ProjectInfo)
    scenario: Scenario = field(default_factory=Scenario)
    library: Library = field(default_factory=Library)
    scenes: List[Scene] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict)

    def find_scene(self, scene_id: str) -> Optional[Scene]:
        for scene in self.scenes:
            if scene.scene_id == scene_id:
                return scene
        return None

    @classmethod
    def from_dict(cls, payload: object) -> "ProjectDocument":
        if not isinstance(payload, Mapping):
            raise ProjectError("Project document root must be a JSON object")
        definitions = _mapping(payload.get("definitions"))
        scenes = payload.get("scenes")
        if not isinstance(scenes, list):
            scenes = []
        return cls(
            project=ProjectInfo.from_dict(payload.get("project")),
            scenario=Scenario.from_payload(payload.get("scenario")),
            library=Library.from_dict(definitions.get("library")),
            scenes=[Scene.from_dict(scene, index) for index, scene in enumerate(scenes)],
            raw=dict(payload),
        )
