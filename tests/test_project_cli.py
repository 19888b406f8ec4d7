import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from storyboard.project import __main__ as project_cli


PROJECT = {
    "project": {"title": "Harbor"},
    "definitions": {
        "library": {
            "characters": {"c1": {"name": "Mina", "blocks": {"char_desc": "a sailor"}}},
            "locations": {"l1": {"name": "Dock", "blocks": {"loc_main": "a foggy dock"}}},
        }
    },
    "scenes": [
        {
            "sceneId": "s1",
            "shots": {
                "start": {"promptBlock": {"base_character_id": "c1", "base_location_id": "l1"}},
                "end": {"prompt": "legacy end"},
            },
        }
    ],
}


def run_cli(tmp_path, *args):
    base = ["--config", str(tmp_path / "config.yaml"), "--cache-file", str(tmp_path / "cache.json")]
    return project_cli.main(base + list(args))


def read_cache(tmp_path):
    return json.loads((tmp_path / "cache.json").read_text(encoding="utf-8"))


def test_set_media_writes_cache_key(tmp_path, capsys):
    code = run_cli(tmp_path, "set-media", "--scene", "s1", "--frame", "start", "--image", "https://img/1.png")

    assert code == 0
    assert read_cache(tmp_path) == {"frame_image_s1_start": "https://img/1.png"}
    assert json.loads(capsys.readouterr().out)["kind"] == "image"


def test_set_media_rejects_blank_value(tmp_path, capsys):
    code = run_cli(tmp_path, "set-media", "--scene", "s1", "--frame", "end", "--prompt", "   ")

    assert code == 1
    assert json.loads(capsys.readouterr().out)["saved"] is False


def test_export_folds_cached_values(tmp_path, capsys):
    project_path = tmp_path / "project.json"
    project_path.write_text(json.dumps(PROJECT), encoding="utf-8")
    out_dir = tmp_path / "exports"
    run_cli(tmp_path, "set-media", "--scene", "s1", "--frame", "end", "--video", "https://vid/end.mp4")
    capsys.readouterr()

    code = run_cli(tmp_path, "export", "--project", str(project_path), "--out", str(out_dir))

    assert code == 0
    destination = Path(json.loads(capsys.readouterr().out)["exported"])
    assert destination.parent == out_dir
    assert destination.name.startswith("Harbor_")
    exported = json.loads(destination.read_text(encoding="utf-8"))
    shots = exported["scenes"][0]["shots"]
    assert shots["start"]["prompt"] == "a sailor. a foggy dock."
    assert shots["end"]["videoUrl"] == "https://vid/end.mp4"


def test_export_missing_project_reports_error(tmp_path, capsys):
    code = run_cli(tmp_path, "export", "--project", str(tmp_path / "nope.json"))

    assert code == 1
    assert "[error]" in capsys.readouterr().err


def test_clear_scopes(tmp_path, capsys):
    run_cli(tmp_path, "set-media", "--scene", "s1", "--frame", "start", "--image", "https://img/1.png")
    run_cli(tmp_path, "set-concept", "character", "c1", "https://img/c1.png")
    run_cli(tmp_path, "set-concept", "prop", "p1", "https://img/p1.png")
    capsys.readouterr()

    assert run_cli(tmp_path, "clear", "project") == 0
    assert json.loads(capsys.readouterr().out)["removed"] == ["frame_image_s1_start"]
    assert sorted(read_cache(tmp_path)) == ["character_image_c1", "keyprop_image_p1"]

    assert run_cli(tmp_path, "clear", "all") == 0
    assert read_cache(tmp_path) == {}


def test_export_title_with_slash_is_written_to_out_dir(tmp_path, capsys):
    document = dict(PROJECT, project={"title": "A/B"})
    project_path = tmp_path / "project.json"
    project_path.write_text(json.dumps(document), encoding="utf-8")
    out_dir = tmp_path / "exports"

    code = run_cli(tmp_path, "export", "--project", str(project_path), "--out", str(out_dir))

    assert code == 0
    destination = Path(json.loads(capsys.readouterr().out)["exported"])
    assert destination.parent == out_dir
    assert destination.name.startswith("A_B_")


def test_export_write_failure_reports_error(tmp_path, capsys):
    project_path = tmp_path / "project.json"
    project_path.write_text(json.dumps(PROJECT), encoding="utf-8")
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("", encoding="utf-8")

    code = run_cli(tmp_path, "export", "--project", str(project_path), "--out", str(blocker))

    assert code == 1
    assert "[error]" in capsys.readouterr().err
