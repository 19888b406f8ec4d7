import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[3]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from storyboard.cache_store.store import MemoryStore  # noqa: E402
from storyboard.project import editor as editor_module  # noqa: E402
from storyboard.project.editor import ShotEditor  # noqa: E402
from storyboard.project.models import ProjectDocument  # noqa: E402


RAW_PROJECT = {
    "project": {"title": "Harbor"},
    "definitions": {
        "library": {
            "characters": {"mira": {"name": "Mira", "blocks": {"char_desc": "a pilot"}}},
            "locations": {"dock": {"name": "Dock", "blocks": {"loc_main": "a harbor"}}},
        }
    },
    "scenes": [
        {
            "sceneId": "s1",
            "shots": {
                "start": {
                    "prompt": "stored start prompt",
                    "promptBlock": {"base_character_id": "mira", "base_location_id": "dock", "override": {}},
                },
                "middle": {"prompt": "legacy middle", "imageUrl": "https://example.com/mid.png"},
            },
        }
    ],
}


@pytest.fixture
def document():
    return ProjectDocument.from_dict(json.loads(json.dumps(RAW_PROJECT)))


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def editor(store):
    return ShotEditor(store)


def test_block_frame_prompt_is_assembled(editor, document):
    scene = document.scenes[0]

    assert editor.prompt_for(scene, "start", document.library) == "a pilot. a harbor."
    assert editor.prompt_for(scene, "middle", document.library) == "legacy middle"
    assert editor.prompt_for(scene, "end", document.library) == ""


def test_cached_prompt_wins_and_blank_saves_are_ignored(editor, store, document):
    scene = document.scenes[0]

    assert editor.save_prompt(scene, "start", "hand edited") is True
    assert editor.save_prompt(scene, "start", "   ") is False
    assert store.get("frame_prompt_s1_start") == "hand edited"
    assert editor.prompt_for(scene, "start", document.library) == "hand edited"

    editor.reset_prompt(scene, "start")
    assert editor.prompt_for(scene, "start", document.library) == "a pilot. a harbor."


def test_assembly_failure_falls_back_to_legacy_prompt(editor, document, monkeypatch):
    def broken(library, prompt_block):
        raise RuntimeError("boom")

    monkeypatch.setattr(editor_module.compiler, "generate_block_prompt", broken)
    scene = document.scenes[0]

    assert editor.prompt_for(scene, "start", document.library) == "stored start prompt"


def test_legacy_fallback_can_be_disabled(store, document):
    editor = ShotEditor(store, legacy_fallback=False)

    assert editor.prompt_for(document.scenes[0], "middle", document.library) == ""


def test_media_urls_prefer_cache_over_document(editor, store, document):
    scene = document.scenes[0]

    assert editor.image_url_for(scene, "middle") == "https://example.com/mid.png"
    editor.save_image_url(scene, "middle", "https://cdn.example.com/mid-v2.png")
    editor.save_video_url(scene, "middle", "https://cdn.example.com/mid.mp4")

    assert editor.image_url_for(scene, "middle") == "https://cdn.example.com/mid-v2.png"
    assert editor.video_url_for(scene, "middle") == "https://cdn.example.com/mid.mp4"
    assert editor.video_url_for(scene, "start") == ""
    assert store.get("frame_video_s1_middle") == "https://cdn.example.com/mid.mp4"


def test_invalid_frame_type_is_rejected(editor, document):
    with pytest.raises(ValueError, match="frame type"):
        editor.image_url_for(document.scenes[0], "climax")


def test_concept_images(editor, store):
    editor.save_concept_image("character", "mira", "https://example.com/mira.png")
    editor.save_concept_image("prop", "lamp", "https://example.com/lamp.png")

    assert store.get("character_image_mira") == "https://example.com/mira.png"
    assert store.get("keyprop_image_lamp") == "https://example.com/lamp.png"
    assert editor.concept_image_for("location", "dock") == ""

    editor.remove_concept_image("prop", "lamp")
    assert editor.concept_image_for("prop", "lamp") == ""

    with pytest.raises(ValueError):
        editor.save_concept_image("vehicle", "car", "https://example.com/car.png")


def test_project_snapshot_round_trip(editor, document):
    editor.save_project(document)
    restored = editor.load_project()

    assert restored.project.title == "Harbor"
    assert restored.raw == document.raw


def test_unreadable_snapshot_is_discarded(editor, store):
    store.set("currentProject", "{broken")

    assert editor.load_project() is None
    assert store.get("currentProject") is None


def test_clear_namespaces():
    store = MemoryStore(
        {
            "frame_image_s1_start": "a",
            "frame_video_s1_start": "b",
            "frame_prompt_s1_start": "c",
            "currentProject": "{}",
            "character_image_mira": "d",
            "keyprop_image_lamp": "e",
            "location_image_loc_1": "f",
            "unrelated": "g",
        }
    )
    editor = ShotEditor(store)

    assert sorted(editor.clear_project()) == [
        "currentProject",
        "frame_image_s1_start",
        "frame_prompt_s1_start",
        "frame_video_s1_start",
    ]
    assert sorted(store.keys()) == ["character_image_mira", "keyprop_image_lamp", "location_image_loc_1", "unrelated"]

    assert len(editor.clear_visual_concepts()) == 3
    assert store.keys() == ["unrelated"]


def test_full_reset_keeps_unrelated_keys():
    store = MemoryStore({"frame_image_s1_end": "a", "character_image_x": "b", "settings": "c"})

    ShotEditor(store).full_reset()

    assert store.keys() == ["settings"]
