# tests/dataloader/test_config_loader.py

from pathlib import Path

import pytest
import yaml

from wardplan.dataloader.config_loader import ConfigLoader
from wardplan.errors import ConfigError
from wardplan.schemas.models import Config


@pytest.fixture()
def tmp_yaml(tmp_path: Path) -> Path:
    """Temporary YAML with valid Config fields."""
    path = tmp_path / "config.yaml"
    cfg = {
        "prioritize_continuity": False,
        "shift_type": "night",
        "nurse_names": ["A", "B", "C", "D", "E", "F"],
        "output_dir": str(tmp_path / "out"),
        "proposal": {"max_attempts": 5},
    }
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(cfg, f)
    return path


def test_load_valid_yaml_returns_config(tmp_yaml: Path):
    """
    @brief
    Verify that valid YAML is correctly parsed and validated.

    @details
    Explicit values are kept and nested defaults
    (io_policy, proposal.backoff_seconds) are applied.
    """
    # --- Arrange ---
    loader = ConfigLoader()

    # --- Act ---
    cfg = loader.load(tmp_yaml)

    # --- Assert ---
    assert isinstance(cfg, Config)
    assert cfg.prioritize_continuity is False
    assert cfg.shift_type == "night"
    assert cfg.nurse_names == ["A", "B", "C", "D", "E", "F"]
    assert cfg.proposal.max_attempts == 5
    assert cfg.proposal.backoff_seconds == pytest.approx(2.0)
    assert cfg.io_policy.write_artifacts is True


def test_no_path_returns_defaults():
    assert ConfigLoader().load(None) == Config()


def test_repository_config_is_valid():
    root = Path(__file__).resolve().parents[2]
    cfg = ConfigLoader().load(root / "config" / "config.yaml")
    assert len(cfg.nurse_names or []) in (5, 6, 7)


def test_missing_file_raises_configerror(tmp_path: Path):
    """
    @brief
    Missing configuration file triggers ConfigError.
    """
    # --- Arrange ---
    loader = ConfigLoader()
    path = tmp_path / "no_such.yaml"

    # --- Act / Assert ---
    with pytest.raises(ConfigError) as e:
        loader.load(path)

    # --- Assert ---
    assert "Configuration file not found" in str(e.value)


def test_wrong_extension_raises_configerror(tmp_path: Path):
    # --- Arrange ---
    path = tmp_path / "config.txt"
    path.write_text("shift_type: day", encoding="utf-8")

    # --- Act / Assert ---
    with pytest.raises(ConfigError):
        ConfigLoader().load(path)


def test_string_path_is_rejected():
    with pytest.raises(ConfigError):
        ConfigLoader().load("config/config.yaml")  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("content", "fragment"),
    [
        ("", "empty"),
        ("- a\n- b\n", "mapping"),
        ("shift_type: [day\n", "yaml parsing failed"),
    ],
)
def test_malformed_yaml_raises_configerror(tmp_path: Path, content: str, fragment: str):
    """
    @brief
    Empty, non-mapping and syntactically broken files are rejected.
    """
    # --- Arrange ---
    path = tmp_path / "config.yaml"
    path.write_text(content, encoding="utf-8")

    # --- Act / Assert ---
    with pytest.raises(ConfigError) as e:
        ConfigLoader().load(path)

    assert fragment in str(e.value).lower()


def test_yaml_with_extra_field_raises_configerror(tmp_yaml: Path):
    """
    @brief
    Unknown keys are rejected by the schema.
    """
    # --- Arrange ---
    data = yaml.safe_load(tmp_yaml.read_text())
    data["extra_field"] = 42
    tmp_yaml.write_text(yaml.safe_dump(data), encoding="utf-8")

    # --- Act / Assert ---
    with pytest.raises(ConfigError) as e:
        ConfigLoader().load(tmp_yaml)

    assert "Invalid configuration structure" in str(e.value)


def test_unsupported_default_roster_raises_configerror(tmp_yaml: Path):
    # --- Arrange ---
    data = yaml.safe_load(tmp_yaml.read_text())
    data["nurse_names"] = ["A", "B", "C"]
    tmp_yaml.write_text(yaml.safe_dump(data), encoding="utf-8")

    # --- Act / Assert ---
    with pytest.raises(ConfigError) as e:
        ConfigLoader().load(tmp_yaml)

    assert "Unsupported roster size: 3" in str(e.value)
