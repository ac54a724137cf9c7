import logging
import os
from pathlib import Path
import json
import shutil
import tempfile
from typing import Dict, Any

from stagelink.errors import ManifestIOError, ParseError

logger = logging.getLogger(__name__)


class ManifestStore:
    """Reads and writes JSON manifests as whole documents."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def load_manifest(self, path: Path) -> Dict[str, Any]:
        """Load a manifest file.

        Args:
            path: Path to the manifest

        Returns:
            Manifest data, with keys in file order

        Raises:
            ManifestIOError: If the file cannot be read
            ParseError: If the file is not a JSON object
        """
        path = Path(path)
        logger.debug(f"Loading manifest from {path}")
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise ManifestIOError(f"Cannot read manifest {path}: {e}") from e

        try:
            data = json.loads(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise ParseError(f"Invalid UTF-8 in {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid JSON in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ParseError(
                f"Manifest {path} must contain a JSON object, got {type(data).__name__}"
            )
        return data

    def dumps(self, data: Dict[str, Any]) -> str:
        """Serialize a manifest the way it is stored on disk."""
        return json.dumps(data, indent=self.indent, ensure_ascii=False) + "\n"

    def write_manifest(self, path: Path, data: Dict[str, Any]) -> Path:
        """Overwrite a manifest file with ``data``.

        The text goes to a temporary file beside ``path`` that then replaces
        it, so the manifest is either fully old or fully new.

        Args:
            path: Destination path
            data: Manifest data to store

        Returns:
            Path where the manifest was stored

        Raises:
            ManifestIOError: If the destination cannot be written
        """
        path = Path(path)
        text = self.dumps(data)
        logger.debug(f"Writing manifest to {path}")
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                f.write(text)
            if path.exists():
                shutil.copymode(path, tmp_name)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise ManifestIOError(f"Cannot write manifest {path}: {e}") from e
        return path
