import json
from pathlib import Path

import pytest
import yaml

from scripts.run import main, run_pipeline
from wardplan.errors import DataError

ROOT = Path(__file__).resolve().parents[1]


def _rooms_csv(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "rooms.csv"
    path.write_text("number,difficulty,is_chemo\n" + body, encoding="utf-8")
    return path


def test_run_pipeline_defaults_create_artifacts(tmp_path: Path):
    """
    @brief
    Pipeline with no config and no CSV plans the default floor.

    @details
    Uses the five default nurse names and the fully occupied unit; every
    artifact is written into the requested output directory.
    """
    # --- Act ---
    result = run_pipeline(None, None, tmp_path)
    arts = result["artifacts"]

    # --- Assert ---
    assert result["total_rooms"] == 30
    assert result["unassigned_rooms"] == []
    assert result["source"] == "engine"
    assert set(arts) == {"schedule", "assignments", "metrics"}
    for path in arts.values():
        assert Path(path).parent == tmp_path
        assert Path(path).exists()

    schedule = json.loads((tmp_path / "schedule.json").read_text(encoding="utf-8"))
    assert schedule["shift_type"] == "day"
    assert [a["name"] for a in schedule["assignments"]][0] == "Nurse Adams"


def test_run_pipeline_with_repository_config_and_sample(tmp_path: Path):
    # --- Arrange ---
    cfg_path = ROOT / "config" / "config.yaml"
    rooms_path = ROOT / "data" / "input" / "rooms_default.csv"

    # --- Act ---
    result = run_pipeline(cfg_path, rooms_path, tmp_path)

    # --- Assert ---
    assert result["total_rooms"] == 27
    metrics = json.loads((tmp_path / "metrics.json").read_text(encoding="utf-8"))
    assert metrics["num_nurses"] == 6
    assert metrics["total_rooms"] == 27


def test_run_pipeline_bad_csv_writes_load_errors(tmp_path: Path):
    # --- Arrange ---
    rooms = _rooms_csv(tmp_path, "600,medium,false\n600,hard,false\n")
    out = tmp_path / "out"

    # --- Act / Assert ---
    with pytest.raises(DataError) as e:
        run_pipeline(None, rooms, out)

    assert "load_errors.json" in str(e.value)
    errors = json.loads((out / "load_errors.json").read_text(encoding="utf-8"))
    assert errors[0]["kind"] == "duplicate_number"


def test_run_pipeline_respects_io_policy(tmp_path: Path):
    # --- Arrange ---
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text(yaml.safe_dump({"io_policy": {"write_artifacts": False}}), "utf-8")
    out = tmp_path / "out"

    # --- Act ---
    result = run_pipeline(cfg_path, None, out)

    # --- Assert ---
    assert result["artifacts"] == {}
    assert not out.exists()


def test_main_exit_codes(tmp_path: Path):
    """
    @brief
    CLI returns 0 for a clean plan and 1 for warnings or controlled errors.
    """
    # --- Arrange ---
    clean = _rooms_csv(tmp_path, "600,medium,false\n604,medium,false\n607,medium,false\n"
                                 "611,medium,false\n619,medium,false\n")
    out = str(tmp_path / "out")

    # --- Act / Assert ---
    assert main(["--input", str(clean), "--output", out]) == 0
    assert main(["--input", str(clean), "--output", out, "--nurses", "A,B"]) == 1
    assert main(["--output", out, "--nurses", "A,B,C,D,E,F"]) == 1
