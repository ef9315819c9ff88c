from __future__ import annotations

import json
import logging
import math

import pytest

from fiducial_target import Detection
from tag_align import AlignmentPoller, Frame, ScriptedFrameSource, load_frames_jsonl
from tag_align.entry import main, run_replay


def _write_jsonl(path, rows) -> None:
    path.write_text("\n".join(json.dumps(r) for r in rows) + "\n", encoding="utf-8")


def test_two_empty_frames_then_tag_7_resolves_to_origin() -> None:
    tag7 = Detection.from_translation(tag_id=7, translation=[2.25, 0.0, 0.0], yaw_deg=0.0)
    source = ScriptedFrameSource([Frame(), Frame(), Frame(detections=(tag7,))])

    received = []
    poller = AlignmentPoller(source=source, consumer=received.append, logger=logging.getLogger("test"))
    poller.start()

    outcomes = [poller.tick() for _ in range(3)]
    assert [o.status for o in outcomes] == ["pending", "pending", "succeeded"]
    assert outcomes[1].cycles == 2

    assert len(received) == 1
    pose = received[0]
    assert pose.x_m == pytest.approx(0.0, abs=1e-9)
    assert pose.y_m == pytest.approx(0.0, abs=1e-9)
    assert pose.heading_rad == pytest.approx(0.0, abs=1e-9)


def test_run_replay_reports_cancelled_when_frames_run_out() -> None:
    source = ScriptedFrameSource([Frame(), Frame()])
    poller = AlignmentPoller(source=source, logger=logging.getLogger("test"))

    outcome = run_replay(poller, source)
    assert outcome.status == "cancelled"
    assert outcome.state.phase == "cancelled"
    assert outcome.pose is None
    assert not poller.is_running()
    assert not poller.ownership.is_held


def test_load_frames_jsonl_best_and_2d_translation(tmp_path) -> None:
    p = tmp_path / "frames.jsonl"
    _write_jsonl(
        p,
        [
            {"detections": []},
            {
                "detections": [
                    {"id": 1, "ambiguity": 0.3, "translation": [2.0, 1.0]},
                    {"id": 2, "ambiguity": 0.1, "translation": [3.0, 0.0, 0.5], "yaw_deg": 5.0},
                ],
                "best": 1,
            },
        ],
    )

    frames = load_frames_jsonl(p)
    assert len(frames) == 2
    assert frames[0].detections == ()
    assert frames[1].best is frames[1].detections[1]
    assert frames[1].detections[0].translation_xy() == (2.0, 1.0)
    assert frames[1].detections[1].yaw_deg == 5.0


def test_load_frames_jsonl_bad_best_index_raises(tmp_path) -> None:
    p = tmp_path / "frames.jsonl"
    _write_jsonl(p, [{"detections": [{"id": 1, "translation": [1.0, 0.0]}], "best": 3}])

    with pytest.raises(RuntimeError):
        load_frames_jsonl(p)


def test_cli_replay_success(tmp_path, capsys) -> None:
    p = tmp_path / "frames.jsonl"
    _write_jsonl(
        p,
        [
            {"detections": []},
            {"detections": []},
            {
                "detections": [
                    {"id": 1, "ambiguity": 0.05, "translation": [6.0, 0.0, 0.0]},
                    {"id": 7, "ambiguity": 0.2, "translation": [2.25, 0.0, 0.0]},
                ],
                "best": 0,
            },
        ],
    )

    rc = main(["--frames", str(p), "--log-level", "WARNING"])
    assert rc == 0

    rec = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert rec["status"] == "succeeded"
    assert rec["tag_id"] == 7
    assert rec["cycles"] == 2
    assert rec["frames_used"] == 3
    assert rec["pose"]["x_m"] == pytest.approx(0.0, abs=1e-9)
    assert rec["pose"]["heading_deg"] == pytest.approx(0.0, abs=1e-9)


def test_cli_replay_timeout(tmp_path, capsys) -> None:
    p = tmp_path / "frames.jsonl"
    _write_jsonl(p, [{"detections": []}] * 5)

    rc = main(["--frames", str(p), "--max-empty-cycles", "3", "--log-level", "ERROR"])
    assert rc == 1

    rec = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert rec["phase"] == "timed_out"
    assert rec["cycles"] == 4
    assert rec["pose"] is None


def test_cli_replay_runs_out_of_frames(tmp_path, capsys) -> None:
    p = tmp_path / "frames.jsonl"
    _write_jsonl(p, [{"detections": []}] * 2)

    rc = main(["--frames", str(p), "--log-level", "ERROR"])
    assert rc == 1

    rec = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert rec["status"] == "cancelled"
    assert rec["phase"] == "cancelled"
    assert rec["cycles"] == 2


def test_cli_config_and_clamp_override(tmp_path, capsys) -> None:
    cfg = tmp_path / "align.yaml"
    cfg.write_text("target:\n  safety_margin_m: 0.25\n", encoding="utf-8")
    p = tmp_path / "frames.jsonl"
    _write_jsonl(p, [{"detections": [{"id": 4, "translation": [3.0, 0.0, 0.0], "yaw_deg": -20.0}]}])

    rc = main(["--frames", str(p), "--config", str(cfg), "--range-max-deg", "10", "--log-level", "ERROR"])
    assert rc == 0

    rec = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    radius = 0.5 + 1.0 + 0.25
    gap_angle = -math.radians(10.0)
    assert rec["pose"]["x_m"] == pytest.approx(3.0 - radius * math.cos(gap_angle))
    assert rec["pose"]["y_m"] == pytest.approx(-radius * math.sin(gap_angle))
    assert rec["pose"]["heading_deg"] == pytest.approx(-10.0)


def test_cli_bad_config_returns_2(tmp_path, capsys) -> None:
    cfg = tmp_path / "align.yaml"
    cfg.write_text("nope: 1\n", encoding="utf-8")
    p = tmp_path / "frames.jsonl"
    _write_jsonl(p, [{"detections": []}])

    rc = main(["--frames", str(p), "--config", str(cfg)])
    assert rc == 2
