import os
import yaml
from pathlib import Path
from typing import Any, Dict, List, Literal
from dotenv import dotenv_values, find_dotenv
from pydantic import BaseModel, Field, field_validator
import logging

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "STAGELINK_CONFIG_PATH"
ENV_PREFIX = "STAGELINK_"


class LinkerConfig(BaseModel):
    """Settings for one linking run.

    Paths are resolved against ``root_dir`` unless they are absolute.
    """

    root_dir: Path = Path(".")
    staging_manifest: Path = Path("jupyterlab/staging/package.json")
    packages_dir: Path = Path("packages")
    manifest_filename: str = "package.json"
    excluded_dirs: List[str] = Field(default_factory=lambda: ["external"])
    path_prefix: str = "../../packages/"
    local_path_marker: str = "file:"
    fallback_version: str = "~4.6.0-alpha.2"
    namespace_key: str = "jupyterlab"
    linking_field: str = "linkedPackages"
    on_name_collision: Literal["overwrite", "error"] = "overwrite"

    @field_validator("excluded_dirs", mode="before")
    @classmethod
    def _split_excluded(cls, value: Any) -> Any:
        # .env values arrive as comma-separated strings
        if isinstance(value, str):
            return [v.strip() for v in value.split(",") if v.strip()]
        return value

    @field_validator("local_path_marker", "manifest_filename")
    @classmethod
    def _not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("must not be empty")
        return value

    def resolve(self, path: Path) -> Path:
        """Return ``path`` relative to ``root_dir`` unless it is absolute."""
        path = Path(path)
        if path.is_absolute():
            return path
        return Path(self.root_dir) / path

    @property
    def staging_manifest_path(self) -> Path:
        return self.resolve(self.staging_manifest)

    @property
    def packages_path(self) -> Path:
        return self.resolve(self.packages_dir)


def get_project_root() -> Path:
    """Get the project root directory.

    Returns:
        Path to the project root directory
    """
    return Path(__file__).parent.parent


def get_config() -> Dict[str, Any]:
    """Get configuration by merging config.yaml and environment variables.
    Values from .env and the process environment take precedence over
    config.yaml values, in that order.

    Returns:
        Dictionary containing merged configuration
    """
    explicit_path = os.getenv(CONFIG_PATH_ENV)
    config_path = Path(explicit_path or str(get_project_root() / "config.yaml"))

    config: Dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, "r") as f:
            config = yaml.safe_load(f) or {}
        if not isinstance(config, dict):
            raise ValueError(f"Config file must contain a mapping: {config_path}")
    elif explicit_path:
        raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        logger.debug(f"No config file at {config_path}, using defaults")

    dotenv_path = find_dotenv(usecwd=True)
    if not dotenv_path:
        logger.debug("No .env file found")
    else:
        config.update(_prefixed(dotenv_values(dotenv_path)))

    config.update(_prefixed(os.environ))
    return config


def load_linker_config(**overrides: Any) -> LinkerConfig:
    """Build a validated LinkerConfig from merged settings.

    Args:
        **overrides: Values that win over every other source. ``None`` values
            are ignored so CLI flags can be passed through unconditionally.

    Returns:
        Validated linker configuration
    """
    config = get_config()
    config.update({k: v for k, v in overrides.items() if v is not None})
    return LinkerConfig(**config)


def _prefixed(values: Any) -> Dict[str, Any]:
    """Pick STAGELINK_* keys and strip the prefix."""
    return {
        key[len(ENV_PREFIX) :].lower(): value
        for key, value in values.items()
        if key.startswith(ENV_PREFIX)
        and key != CONFIG_PATH_ENV
        and value is not None
    }
