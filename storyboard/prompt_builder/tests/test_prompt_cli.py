import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[3]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from storyboard.prompt_builder import __main__ as prompt_cli  # noqa: E402
from storyboard.prompt_builder.models import Library, PromptBlock  # noqa: E402
from storyboard.prompt_builder.services import PromptCompilerService  # noqa: E402
from storyboard.project.models import ProjectDocument  # noqa: E402


PROJECT = {
    "project": {"title": "Harbor", "style": "anime", "totalDuration": 24},
    "definitions": {
        "library": {
            "characters": {"mira": {"name": "Mira", "blocks": {"style_main": "anime", "char_desc": "a pilot"}}},
            "locations": {"dock": {"name": "Dock", "blocks": {"loc_main": "a foggy harbor"}}},
            "props": {},
        }
    },
    "scenes": [
        {
            "scene": 1,
            "sceneId": "s1",
            "shots": {
                "start": {
                    "shotType": "block_based",
                    "promptBlock": {"base_character_id": "mira", "base_location_id": "dock", "override": {}},
                },
                "end": {"shotType": "wide", "prompt": "legacy end prompt"},
            },
        }
    ],
}


@pytest.fixture
def cli_paths(tmp_path, monkeypatch):
    bundle = tmp_path / "bundle" / "prompt_bundle.json"
    monkeypatch.setenv("PROMPT_BUNDLE_PATH", str(bundle))
    project_path = tmp_path / "project.json"
    project_path.write_text(json.dumps(PROJECT), encoding="utf-8")
    return {
        "config": str(tmp_path / "config.yaml"),
        "cache": str(tmp_path / "cache.json"),
        "project": str(project_path),
        "bundle": bundle,
        "root": tmp_path,
    }


def test_cli_compiles_project_frames(cli_paths, capsys):
    prompt_cli.main(["--config", cli_paths["config"], "--cache-file", cli_paths["cache"], "--project", cli_paths["project"]])
    rows = json.loads(capsys.readouterr().out)

    assert [(row["frame"], row["kind"]) for row in rows] == [("start", "block"), ("end", "legacy")]
    assert rows[0]["prompt"] == "anime. a pilot. a foggy harbor."
    assert rows[1]["prompt"] == "legacy end prompt"
    assert not cli_paths["bundle"].exists()


def test_cli_filters_and_publishes(cli_paths, capsys):
    prompt_cli.main(
        [
            "--config",
            cli_paths["config"],
            "--cache-file",
            cli_paths["cache"],
            "--project",
            cli_paths["project"],
            "--frame",
            "start",
            "--publish",
        ]
    )
    rows = json.loads(capsys.readouterr().out)
    bundle = json.loads(cli_paths["bundle"].read_text(encoding="utf-8"))

    assert len(rows) == 1
    assert bundle["project"] == "Harbor"
    assert bundle["prompts"] == rows
    assert bundle["prompt_text"] == "anime. a pilot. a foggy harbor."
    assert bundle["compiled_at"].endswith("Z")


def test_cli_compiles_single_block(cli_paths, capsys):
    block_path = cli_paths["root"] / "block.json"
    block_path.write_text(
        json.dumps({"base_character_id": "mira", "base_location_id": "dock", "override": {"model_params": "--ar 16:9"}}),
        encoding="utf-8",
    )

    prompt_cli.main(["--config", cli_paths["config"], "--library", cli_paths["project"], "--block", str(block_path)])

    assert capsys.readouterr().out.strip() == "anime. a pilot. a foggy harbor. --ar 16:9"


def test_cli_lists_fields_in_korean(cli_paths, capsys):
    prompt_cli.main(["--config", cli_paths["config"], "--fields", "--locale", "ko"])
    rows = json.loads(capsys.readouterr().out)

    assert rows[0]["label"] == "메인 스타일"


def test_cli_rejects_project_without_scenes(cli_paths):
    empty_path = cli_paths["root"] / "empty.json"
    empty_path.write_text(json.dumps({"project": {"title": "Empty"}}), encoding="utf-8")

    with pytest.raises(SystemExit, match="no scenes"):
        prompt_cli.main(["--config", cli_paths["config"], "--cache-file", cli_paths["cache"], "--project", str(empty_path)])


def test_compiler_service_block_and_project_need_editor():
    service = PromptCompilerService()
    library = Library.from_dict(PROJECT["definitions"]["library"])

    assert service.compile_block(library, PromptBlock(base_character_id="mira")) == "anime. a pilot."
    with pytest.raises(ValueError):
        service.compile_project(ProjectDocument.from_dict(PROJECT))
