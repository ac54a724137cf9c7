"""Shared test fixtures."""

import os
import pytest
from pathlib import Path
from typing import Any, Callable, Dict

from stagelink.config import LinkerConfig

from .utils import write_json


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep STAGELINK_* variables and stray .env files out of tests."""
    for key in list(os.environ):
        if key.startswith("STAGELINK_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def linker_config(tmp_path: Path) -> LinkerConfig:
    """Default configuration rooted at a temporary repository."""
    return LinkerConfig(root_dir=tmp_path)


@pytest.fixture
def packages_dir(linker_config: LinkerConfig) -> Path:
    path = linker_config.packages_path
    path.mkdir(parents=True)
    return path


@pytest.fixture
def add_package(packages_dir: Path) -> Callable[..., Path]:
    """Create a package directory holding a package.json."""

    def _add(directory: str, manifest: Dict[str, Any] | None = None) -> Path:
        data = manifest if manifest is not None else {"name": f"@scope/{directory}"}
        return write_json(packages_dir / directory / "package.json", data)

    return _add


@pytest.fixture
def staging_manifest(linker_config: LinkerConfig) -> Callable[[Dict[str, Any]], Path]:
    """Write the staging manifest for a test."""

    def _write(data: Dict[str, Any]) -> Path:
        return write_json(linker_config.staging_manifest_path, data)

    return _write
