"""Semantic field catalog shared by the prompt assembler and editing UIs.

- Purpose: enumerate every semantic block key, its group, and its display labels.
- Assumptions: keys are stable identifiers persisted in project documents and must never be renamed.
- Side effects: none; module-level constants only.
"""

from __future__ import annotations

from typing import Dict, List, Tuple


STYLE_FIELDS: Tuple[str, ...] = ("style_main", "style_ref", "media_type", "genre")

CHARACTER_FIELDS: Tuple[str, ...] = (
    "char_desc",
    "char_body",
    "char_hair",
    "char_face_shape",
    "char_features",
    "char_skin",
    "char_expression",
    "char_outfit",
    "char_acc",
    "char_held_prop",
    "action_pose",
    "camera_gaze",
    "char_lighting_side",
)

LOCATION_FIELDS: Tuple[str, ...] = (
    "loc_main",
    "loc_scale",
    "loc_structure",
    "loc_material",
    "loc_objects",
    "loc_weather",
    "loc_light_natural",
    "loc_light_art",
    "loc_light_mood",
    "loc_fg",
    "loc_mg",
    "loc_bg",
    "loc_left",
    "loc_right",
    "loc_ceiling",
    "loc_floor",
)

PROP_FIELDS: Tuple[str, ...] = (
    "prop_name",
    "prop_condition",
    "prop_detail",
    "prop_function",
    "prop_special",
    "prop_glow",
    "prop_bg",
)

CAMERA_QUALITY_FIELDS: Tuple[str, ...] = ("camera_shot", "atmosphere", "bg_simple", "quality_tags", "model_params")

FIELD_GROUPS: Dict[str, Tuple[str, ...]] = {
    "style": STYLE_FIELDS,
    "character": CHARACTER_FIELDS,
    "location": LOCATION_FIELDS,
    "props": PROP_FIELDS,
    "camera_quality": CAMERA_QUALITY_FIELDS,
}

ALL_FIELDS: Tuple[str, ...] = tuple(key for group in FIELD_GROUPS.values() for key in group)


# Chunk layout consumed by the compiler. Each entry is (field, base) where base
# names the library template the field is read from before overrides apply.
CHARACTER_BASE = "character"
LOCATION_BASE = "location"

STYLE_CHUNK: Tuple[Tuple[str, str], ...] = tuple((key, CHARACTER_BASE) for key in STYLE_FIELDS)

# camera_shot is read from the location template, camera_gaze from the character.
CAMERA_CHUNK: Tuple[Tuple[str, str], ...] = (
    ("camera_shot", LOCATION_BASE),
    ("camera_gaze", CHARACTER_BASE),
)

SUBJECT_CHUNK: Tuple[Tuple[str, str], ...] = tuple(
    (key, CHARACTER_BASE)
    for key in (
        # who
        "char_desc",
        # doing what
        "action_pose",
        "char_expression",
        # looking how
        "char_body",
        "char_skin",
        "char_hair",
        "char_face_shape",
        "char_features",
        "char_outfit",
        "char_acc",
        "char_held_prop",
        "char_lighting_side",
    )
)

BACKGROUND_CHUNK: Tuple[Tuple[str, str], ...] = tuple(
    (key, LOCATION_BASE)
    for key in (
        # where
        "loc_main",
        # place detail
        "loc_structure",
        "loc_material",
        "loc_objects",
        "loc_weather",
        # mood and lighting
        "atmosphere",
        "loc_light_mood",
        "loc_light_natural",
        "loc_light_art",
        # spatial layout
        "loc_fg",
        "loc_bg",
    )
)

PARAMETER_CHUNK: Tuple[Tuple[str, str], ...] = (
    ("quality_tags", CHARACTER_BASE),
    ("model_params", CHARACTER_BASE),
)

DESCRIPTIVE_CHUNKS: Dict[str, Tuple[Tuple[str, str], ...]] = {
    "style": STYLE_CHUNK,
    "camera": CAMERA_CHUNK,
    "subject": SUBJECT_CHUNK,
    "background": BACKGROUND_CHUNK,
}

ASSEMBLED_FIELDS: Tuple[str, ...] = tuple(
    key for chunk in (*DESCRIPTIVE_CHUNKS.values(), PARAMETER_CHUNK) for key, _ in chunk
)


LABELS_EN: Dict[str, str] = {
    # Style
    "style_main": "Main Style",
    "style_ref": "Style Reference",
    "media_type": "Media Type",
    "genre": "Genre",
    # Character
    "char_desc": "Character Description",
    "char_body": "Body Type",
    "char_hair": "Hair",
    "char_face_shape": "Face Shape",
    "char_features": "Distinctive Features",
    "char_skin": "Skin",
    "char_expression": "Expression",
    "char_outfit": "Outfit",
    "char_acc": "Accessories",
    "char_held_prop": "Held Item",
    "action_pose": "Action / Pose",
    "camera_gaze": "Gaze",
    "char_lighting_side": "Character Lighting",
    # Location
    "loc_main": "Location",
    "loc_scale": "Scale",
    "loc_structure": "Structure",
    "loc_material": "Material",
    "loc_objects": "Objects",
    "loc_weather": "Weather",
    "loc_light_natural": "Natural Light",
    "loc_light_art": "Artificial Light",
    "loc_light_mood": "Lighting Mood",
    "loc_fg": "Foreground",
    "loc_mg": "Midground",
    "loc_bg": "Background",
    "loc_left": "Left Side",
    "loc_right": "Right Side",
    "loc_ceiling": "Ceiling",
    "loc_floor": "Floor",
    # Props
    "prop_name": "Prop Name",
    "prop_condition": "Condition",
    "prop_detail": "Detail",
    "prop_function": "Function",
    "prop_special": "Special Effect",
    "prop_glow": "Glow",
    "prop_bg": "Prop Background",
    # Camera & Quality
    "camera_shot": "Camera Shot",
    "atmosphere": "Atmosphere",
    "bg_simple": "Simple Background",
    "quality_tags": "Quality Tags",
    "model_params": "Model Parameters",
}

LABELS_KO: Dict[str, str] = {
    "style_main": "메인 스타일",
    "style_ref": "참조 스타일",
    "media_type": "미디어 타입",
    "genre": "장르",
    "char_desc": "캐릭터 설명",
    "char_body": "체형",
    "char_hair": "헤어",
    "char_face_shape": "얼굴형",
    "char_features": "특징",
    "char_skin": "피부",
    "char_expression": "표정",
    "char_outfit": "의상",
    "char_acc": "장신구",
    "char_held_prop": "소지품",
    "action_pose": "동작/포즈",
    "camera_gaze": "시선",
    "char_lighting_side": "캐릭터 조명",
    "loc_main": "장소",
    "loc_scale": "규모",
    "loc_structure": "구조",
    "loc_material": "재질",
    "loc_objects": "오브젝트",
    "loc_weather": "날씨",
    "loc_light_natural": "자연광",
    "loc_light_art": "인공광",
    "loc_light_mood": "조명 분위기",
    "loc_fg": "전경",
    "loc_mg": "중경",
    "loc_bg": "배경",
    "loc_left": "좌측",
    "loc_right": "우측",
    "loc_ceiling": "천장",
    "loc_floor": "바닥",
    "prop_name": "소품명",
    "prop_condition": "상태",
    "prop_detail": "디테일",
    "prop_function": "기능",
    "prop_special": "특수효과",
    "prop_glow": "발광",
    "prop_bg": "소품 배경",
    "camera_shot": "카메라 샷",
    "atmosphere": "분위기",
    "bg_simple": "간단 배경",
    "quality_tags": "품질 태그",
    "model_params": "모델 파라미터",
}

LABELS: Dict[str, Dict[str, str]] = {"en": LABELS_EN, "ko": LABELS_KO}
DEFAULT_LOCALE = "en"


def format_semantic_key(key: str, locale: str = DEFAULT_LOCALE) -> str:
    """Return the display label for a semantic field key.

    Unknown keys are returned unchanged; unknown locales fall back to English.
    """

    labels = LABELS.get(locale, LABELS[DEFAULT_LOCALE])
    return labels.get(key, key)


def describe_catalog(locale: str = DEFAULT_LOCALE) -> List[Dict[str, str]]:
    """Return the catalog as rows suitable for rendering an override form."""

    return [
        {"key": key, "group": group, "label": format_semantic_key(key, locale)}
        for group, keys in FIELD_GROUPS.items()
        for key in keys
    ]
