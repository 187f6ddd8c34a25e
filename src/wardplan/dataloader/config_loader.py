# src/wardplan/dataloader/config_loader.py
from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from wardplan.errors import ConfigError
from wardplan.layout.roster import build_roster
from wardplan.schemas.models import Config

logger = logging.getLogger(__name__)


class ConfigLoader:
    """
    @brief
    Reads and validates the runtime configuration (config.yaml).

    @details
    YAML is parsed with `yaml.safe_load`, validated against the pydantic
    `Config` schema and, when a default roster is configured, checked for a
    supported roster size. Every failure surfaces as a `ConfigError`.
    """

    def load(self, path: Path | None) -> Config:
        """
        @brief
        Load configuration from YAML, or defaults when no path is given.

        @params
            path : Path | None
                Filesystem path to a .yaml/.yml file.

        @returns
            Validated Config instance with defaults applied.

        @raises
            ConfigError
                Missing, malformed or schema-invalid file; unsupported roster size.
        """
        if path is None:
            logger.info("No config file given, using defaults.")
            return Config()

        # (1) Read and parse YAML
        data = self._read_yaml(path)

        # (2) Schema validation and roster check
        cfg = self._validate(data)
        logger.info("Config loaded from %s", path)
        return cfg

    def _read_yaml(self, path: Path) -> dict[str, Any]:
        """
        @brief
        Read a YAML file into a plain dict with strict checks.

        @raises
            ConfigError
                Invalid path type, missing file, wrong extension, I/O error,
                syntax error, empty file or non-mapping root.
        """
        # (1) Path type and existence
        if not isinstance(path, Path):
            raise ConfigError(
                message=f"Invalid path type: expected pathlib.Path, got {type(path).__name__}",
                source="ConfigLoader._read_yaml",
                suggested_action="Pass a pathlib.Path object pointing to config.yaml.",
            )

        if not path.exists():
            raise ConfigError(
                message=f"Configuration file not found: {path}",
                source="ConfigLoader._read_yaml",
                suggested_action="Ensure config.yaml exists and the path is correct.",
            )

        if path.suffix.lower() not in {".yaml", ".yml"}:
            raise ConfigError(
                message=f"Invalid configuration file extension: {path.suffix}",
                source="ConfigLoader._read_yaml",
                suggested_action="Use .yaml or .yml extension for configuration files.",
            )

        # (2) Parse
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(
                message=f"YAML parsing failed: {e}",
                source="ConfigLoader._read_yaml",
                suggested_action="Fix YAML syntax/indentation.",
            ) from e
        except OSError as e:
            raise ConfigError(
                message=f"Unable to read configuration file: {e}",
                source="ConfigLoader._read_yaml",
                suggested_action="Check file permissions and path accessibility.",
            ) from e

        # (3) Structure
        if data is None:
            raise ConfigError(
                message="Configuration file is empty.",
                source="ConfigLoader._read_yaml",
                suggested_action="Populate config.yaml or omit it to use defaults.",
            )

        if not isinstance(data, Mapping):
            raise ConfigError(
                message="Configuration root must be a mapping (key: value pairs).",
                source="ConfigLoader._read_yaml",
                suggested_action="Ensure top-level YAML structure uses key: value mappings.",
            )

        return dict(data)

    def _validate(self, data: dict[str, Any]) -> Config:
        # (1) Pydantic schema, unknown keys rejected
        try:
            cfg = Config(**data)
        except ValidationError as e:
            raise ConfigError(
                message=f"Invalid configuration structure: {e}",
                source="ConfigLoader._validate",
                suggested_action=(
                    "Check field names and types in config.yaml. "
                    "Remove unknown keys (extra fields are forbidden)."
                ),
            ) from e

        # (2) Default roster must have a supported size; raises ConfigError
        if cfg.nurse_names:
            build_roster(cfg.nurse_names)
        return cfg


__all__ = ["ConfigLoader"]
