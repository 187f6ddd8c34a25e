# scripts/gen_schemas.py
"""
Generate JSON Schemas for the Wardplan data models.

This script exports JSON Schema files for:
    - Room (rooms CSV rows)
    - Config (config.yaml)
    - SchedulingResult (schedule.json)
    - ExternalProposal (answer format of an external proposal source)

Output directory: schemas/
"""

import json
from pathlib import Path

from wardplan.schemas.models import Config, ExternalProposal, Room, SchedulingResult


def export_schema(model_cls, name: str, out_dir: Path) -> Path:
    """
    @brief
    Exports the JSON schema of a given Pydantic model.

    @details
    Writes "<name>.schema.json" into `out_dir` (created if missing) and
    prints the path relative to the current working directory.

    @returns
        Path of the written schema file.
    """
    # (1) Ensure output directory exists
    out_dir.mkdir(parents=True, exist_ok=True)

    # (2) Generate schema
    schema_path = (out_dir / f"{name}.schema.json").resolve()
    schema = model_cls.model_json_schema(by_alias=True)

    # (3) Serialize with indentation and final newline
    with schema_path.open("w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2, ensure_ascii=False)
        f.write("\n")

    try:
        rel = schema_path.relative_to(Path.cwd())
    except ValueError:
        rel = schema_path
    print(f"Generated {rel}")
    return schema_path


def main(out_dir: Path | None = None) -> None:
    out_dir = (out_dir or Path("schemas")).resolve()

    export_schema(Room, "room", out_dir)
    export_schema(Config, "config", out_dir)
    export_schema(SchedulingResult, "schedule", out_dir)
    export_schema(ExternalProposal, "proposal", out_dir)


if __name__ == "__main__":
    main()
