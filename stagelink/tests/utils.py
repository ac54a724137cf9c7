"""Test utilities."""

import json
from pathlib import Path
from typing import Any, Dict


def write_json(path: Path, data: Any) -> Path:
    """Write ``data`` as a JSON file, creating parent directories.

    Args:
        path: Destination file
        data: JSON-compatible data

    Returns:
        Path: The written file
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return path


def read_json(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data: Dict[str, Any] = json.load(f)
        return data
