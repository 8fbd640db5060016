import json

import pytest

from src.editor.replay import ReplayError, apply_step, build_session, main, summarize


def _script(**overrides):
    script = {
        "mode": "asset",
        "image": {"width": 200, "height": 100},
        "viewport": {"width": 400, "height": 300},
        "steps": [
            {"pointer": "down", "x": 110, "y": 110},
            {"pointer": "move", "x": 130, "y": 140},
            {"pointer": "up", "x": 150, "y": 160},
            {"fps": 12},
        ],
    }
    script.update(overrides)
    return script


def test_main_replays_script_and_saves_document(tmp_path, capsys):
    script_path = tmp_path / "script.json"
    script_path.write_text(json.dumps(_script()), encoding="utf-8")
    save_path = tmp_path / "out" / "sheet.json"

    assert main([str(script_path), "--save", str(save_path)]) == 0

    saved = json.loads(save_path.read_text(encoding="utf-8"))
    assert saved["idle"]["fps"] == 12
    assert saved["idle"]["frames"][0]["w"] == 40

    out = capsys.readouterr().out
    assert f"Saved document to {save_path}" in out
    summary = json.loads(out[out.index("{"):])
    assert summary["selectedFrameIndex"] == 0
    assert summary["status"] == "Created frame 0 in 'idle'."


def test_main_starts_from_existing_document(tmp_path, capsys):
    document = tmp_path / "doc.json"
    document.write_text(json.dumps({"walk": [{"x": 0, "y": 0, "w": 4, "h": 4}]}), encoding="utf-8")
    script_path = tmp_path / "script.json"
    script_path.write_text(json.dumps(_script(steps=[])), encoding="utf-8")

    assert main([str(script_path), "--document", str(document)]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["currentAnimation"] == "walk"
    assert summary["animations"]["walk"]["fps"] == 8


def test_main_reports_bad_script(tmp_path, capsys):
    script_path = tmp_path / "script.json"
    script_path.write_text(json.dumps(_script(steps=[{"teleport": 1}])), encoding="utf-8")
    assert main([str(script_path)]) == 2
    assert "unrecognised step" in capsys.readouterr().err


def test_level_replay_paints_tiles():
    session = build_session({"mode": "level", "viewport": {"width": 400, "height": 300}})
    apply_step(session, {"brush": "grass.png"}, 0)
    apply_step(session, {"pointer": "down", "x": 200, "y": 150}, 1)
    apply_step(session, {"pointer": "up", "x": 200, "y": 150}, 2)
    assert summarize(session)["tiles"] == {"0,0": {"imageRef": "grass.png"}}


def test_preview_steps():
    session = build_session(_script())
    for index, step in enumerate(_script()["steps"]):
        apply_step(session, step, index)
    apply_step(session, {"preview": "start", "at": 0}, 4)
    assert summarize(session)["previewFrameIndex"] == 0
    apply_step(session, {"preview": "stop"}, 5)
    assert summarize(session)["previewFrameIndex"] is None


@pytest.mark.parametrize(
    "step",
    [
        "down",
        {"pointer": "drag", "x": 0, "y": 0},
        {"pointer": "down", "x": "a", "y": 0},
        {"intent": "explode"},
        {"tool": "brush"},
        {"preview": "rewind"},
    ],
)
def test_malformed_steps_raise_replay_error(step):
    session = build_session(_script())
    with pytest.raises(ReplayError):
        apply_step(session, step, 0)


def test_unknown_mode_is_rejected():
    with pytest.raises(ReplayError):
        build_session({"mode": "3d"})
