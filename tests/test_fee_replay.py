from __future__ import annotations

import json
from pathlib import Path

import pytest


def test_load_ratios_json_and_lines(tmp_path: Path) -> None:
    from tools.fee_replay import load_ratios

    js = tmp_path / "r.json"
    js.write_text('[1000000000000000000, "13e17"]', encoding="utf-8")
    assert load_ratios(js) == [10**18, 13 * 10**17]

    txt = tmp_path / "r.txt"
    txt.write_text("# header\n1e18\n\n13e17  # spike\n", encoding="utf-8")
    assert load_ratios(txt) == [10**18, 13 * 10**17]


def test_main_prints_one_row_per_cycle(tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
    from tools.fee_replay import main

    monkeypatch.delenv("POOLFEE_CONFIG", raising=False)
    ratios = tmp_path / "r.txt"
    ratios.write_text("1e18\n13e17\n13e17\n", encoding="utf-8")
    rc = main(["--ratios", str(ratios), "--pool-type", "standard", "--initial-fee", "3000", "--initial-target", "1e18"])
    assert rc == 0

    rows = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert [r["cycle"] for r in rows] == [0, 1, 2]
    assert rows[0]["effects"]["in_band"] is True
    assert rows[0]["state"]["fee"] == 3_000
    assert [r["state"]["oob_consecutive_hits"] for r in rows] == [0, 1, 2]
    assert rows[1]["state"]["fee"] > 3_000
    assert rows[2]["state"]["fee"] > rows[1]["state"]["fee"]


def test_main_rejected_poke_exits_1(tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
    from tools.fee_replay import main

    monkeypatch.delenv("POOLFEE_CONFIG", raising=False)
    ratios = tmp_path / "r.txt"
    ratios.write_text("1e18\n2e21\n", encoding="utf-8")
    rc = main(["--ratios", str(ratios), "--initial-fee", "3000", "--initial-target", "1e18"])
    assert rc == 1
    assert len(capsys.readouterr().out.splitlines()) == 1


def test_main_bad_input_exits_2(tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
    from tools.fee_replay import main

    monkeypatch.delenv("POOLFEE_CONFIG", raising=False)
    ratios = tmp_path / "r.txt"
    ratios.write_text("one\n", encoding="utf-8")
    rc = main(["--ratios", str(ratios), "--initial-fee", "3000", "--initial-target", "1e18"])
    assert rc == 2
    assert "fee_replay error" in capsys.readouterr().err


def test_main_initial_fee_outside_pool_range_exits_2(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from tools.fee_replay import main

    monkeypatch.delenv("POOLFEE_CONFIG", raising=False)
    ratios = tmp_path / "r.txt"
    ratios.write_text("1e18\n", encoding="utf-8")
    rc = main(["--ratios", str(ratios), "--pool-type", "stable", "--initial-fee", "3000", "--initial-target", "1e18"])
    assert rc == 2
