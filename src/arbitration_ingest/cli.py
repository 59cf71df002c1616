from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd
import yaml
from pydantic import ValidationError

from .config import load_config
from .errors import FormatError
from .logging_utils import get_logger, log_error, log_system_event
from .pipeline import ingest_workbook
from .validation_report import write_outputs
from .workbook_reader import frame_to_rows


def load_existing_records(path: Optional[str]) -> List[Dict[str, Any]]:
    """Load an existing-case snapshot from CSV or JSON (list of objects)."""

    if not path:
        return []
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Existing records snapshot not found: {p}")
    if p.suffix.lower() == ".json":
        with p.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"Expected a JSON list of records in {p}")
        return [row for row in data if isinstance(row, dict)]
    return frame_to_rows(pd.read_csv(p, dtype=str))


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Normalize an AAA or JAMS case workbook")
    p.add_argument("--input", required=True, help="Path to the workbook (.xlsx/.xls)")
    p.add_argument("--existing", required=False, help="CSV or JSON snapshot of already stored cases")
    p.add_argument("--config", required=False, help="Path to config YAML")
    p.add_argument("--output", required=False, help="Output directory (overrides paths.output_dir)")
    return p.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Exit codes: 0 ok, 1 unreadable workbook, 2 bad config, 3 missing or malformed input file."""

    args = _parse_args(argv)
    try:
        config = load_config(args.config)
    except (ValidationError, yaml.YAMLError) as exc:
        print(json.dumps({"status": "error", "message": f"Invalid config: {exc}"}, indent=2))
        return 2

    logger = get_logger("arbitration_ingest", config)
    input_path = Path(args.input)
    log_system_event(logger, f"Ingestion started for {input_path.name}")
    try:
        existing = load_existing_records(args.existing)
        result = ingest_workbook(input_path.read_bytes(), input_path.name, existing, config)
    except FormatError as exc:
        log_error(logger, str(exc))
        return 1
    except (OSError, ValueError) as exc:
        log_error(logger, f"Could not load input: {exc}")
        return 3

    paths = write_outputs(result, args.output or config.paths.output_dir)
    log_system_event(logger, f"Ingestion finished: {json.dumps(result.summary())}")
    for name, path in paths.items():
        logger.info("%s -> %s", name, path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
