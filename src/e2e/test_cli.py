import json
from pathlib import Path

import pytest

from coach_ui.__main__ import main


def _dsns(tmp: Path) -> list[str]:
    return ["--remote-db", f"sqlite:///{tmp / 'h.sqlite'}", "--local-db", f"json:///{tmp / 'l.json'}"]


@pytest.mark.e2e
def test_cli_render_marks_mistakes(tmp_path: Path, capsys):
    res = tmp_path / "result.json"
    res.write_text('```json\n{"correctedText": "She went home.", "mistakes": '
                   '[{"original": "goed", "correction": "went", "explanation": "irregular"}]}\n```',
                   encoding="utf-8")
    rc = main(_dsns(tmp_path) + ["render", "--text", "She goed home.", "--result-file", str(res)])
    out = capsys.readouterr().out
    assert rc == 0
    assert "She [goed] home." in out
    assert "She {went} home." in out


@pytest.mark.e2e
def test_cli_save_history_delete_roundtrip(tmp_path: Path, capsys):
    base = _dsns(tmp_path)
    assert main(base + ["save", "--text", "anon try"]) == 2
    capsys.readouterr()

    assert main(base + ["--user", "u1", "save", "--text", "cloud one", "--casual", "hey"]) == 0
    remote_id = capsys.readouterr().out.strip()
    assert main(base + ["save", "--text", "local one", "--local"]) == 0
    local_id = capsys.readouterr().out.strip()

    assert main(base + ["--user", "u1", "--json", "history"]) == 0
    rows = json.loads(capsys.readouterr().out)
    assert [r["id"] for r in rows] == [remote_id, local_id]

    assert main(base + ["report", local_id]) == 0
    out = capsys.readouterr().out
    assert "ORIGINAL" in out and "local one" in out

    out_pdf = tmp_path / "r.pdf"
    assert main(base + ["--user", "u1", "report", remote_id, "--out", str(out_pdf)]) == 0
    assert out_pdf.read_bytes().startswith(b"%PDF")

    assert main(base + ["--user", "u1", "delete", local_id]) == 0
    assert main(base + ["--user", "u1", "--json", "history"]) == 0
    rows = json.loads(capsys.readouterr().out)
    assert [r["id"] for r in rows] == [remote_id]


def test_verbose_env_flag_turns_on_logging(monkeypatch):
    import logging

    import coach.config as CFG
    from coach.engine import Engine

    calls = []
    monkeypatch.setattr(CFG, "VERBOSE", True)
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
    monkeypatch.setenv("COACH_VERBOSE", "0")
    Engine().open(remote_dsn="memory://", local_dsn="memory://").shutdown()
    assert calls == [{"level": logging.INFO}]
