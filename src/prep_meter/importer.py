"""Import user record exports from JSON or YAML files."""
import json
import logging
from pathlib import Path

import yaml

from prep_meter.codec import RecordFormatError, records_from_dict
from prep_meter.db import save_export

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".json", ".yaml", ".yml")


def read_export(file_path: str) -> dict:
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        data = json.loads(path.read_text())
    elif suffix in (".yaml", ".yml"):
        data = yaml.safe_load(path.read_text())
    else:
        raise RecordFormatError(f"unsupported file type {suffix or path.name!r}; expected one of {', '.join(SUPPORTED_SUFFIXES)}")
    if not isinstance(data, dict):
        raise RecordFormatError(f"{path.name}: expected a mapping at the top level")
    return data


def import_file(db_path: str, file_path: str) -> dict:
    """Validate an export file and store its records. Nothing is stored if validation fails."""
    export = read_export(file_path)
    records = records_from_dict(export)
    counts = save_export(db_path, export)
    logger.info("Imported %s (%d daily plans, %d tests)", Path(file_path).name, len(records.daily_plans), len(records.tests))
    return {"filename": Path(file_path).name, "counts": counts}
