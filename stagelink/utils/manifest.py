from typing import Dict, Any, TypedDict, List, Iterable
from pathlib import Path
import logging

from stagelink.config import LinkerConfig
from stagelink.errors import ManifestIOError, SchemaError
from stagelink.storage import ManifestStore

# Set up logging
logger = logging.getLogger(__name__)


class LocalPackage(TypedDict):
    name: str
    directory: str
    relative_path: str


def discover_local_packages(packages_dir: Path, config: LinkerConfig) -> List[str]:
    """Find package directories under the local packages root.

    A directory qualifies when it holds a manifest file and its name is not
    excluded.

    Args:
        packages_dir: Directory with one subdirectory per package
        config: Linker configuration

    Returns:
        Qualifying directory names, sorted
    """
    packages_dir = Path(packages_dir)
    try:
        entries = sorted(packages_dir.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise ManifestIOError(f"Cannot list packages directory {packages_dir}: {e}") from e

    excluded = set(config.excluded_dirs)
    directories = []
    for entry in entries:
        if entry.name in excluded:
            logger.debug(f"Skipping excluded directory {entry.name}")
            continue
        try:
            qualifies = entry.is_dir() and (entry / config.manifest_filename).is_file()
        except OSError as e:
            raise ManifestIOError(f"Cannot inspect package directory {entry}: {e}") from e
        if qualifies:
            directories.append(entry.name)
    return directories


def read_package(
    packages_dir: Path, directory: str, config: LinkerConfig, store: ManifestStore
) -> LocalPackage:
    """Load one package manifest and describe where it lives."""
    manifest_path = Path(packages_dir) / directory / config.manifest_filename
    manifest = store.load_manifest(manifest_path)
    name = manifest.get("name")
    if not isinstance(name, str) or not name:
        raise SchemaError(f"Manifest {manifest_path} has no usable 'name' field")
    return LocalPackage(
        name=name,
        directory=directory,
        relative_path=f"{config.path_prefix}{directory}",
    )


def build_linked_packages(
    packages_dir: Path,
    directories: Iterable[str],
    config: LinkerConfig,
    store: ManifestStore | None = None,
) -> Dict[str, str]:
    """Map each local package name to its path relative to the target manifest.

    Args:
        packages_dir: Directory with one subdirectory per package
        directories: Qualifying directory names, in iteration order
        config: Linker configuration
        store: Manifest reader, a default ManifestStore if None

    Returns:
        Mapping of package name to relative path
    """
    store = store or ManifestStore()
    linked: Dict[str, str] = {}
    owners: Dict[str, str] = {}
    for directory in directories:
        package = read_package(packages_dir, directory, config, store)
        name = package["name"]
        if name in linked:
            message = (
                f"Package name {name!r} is declared in both "
                f"{owners[name]!r} and {package['directory']!r}"
            )
            if config.on_name_collision == "error":
                raise SchemaError(message)
            logger.warning(f"{message}; using {package['directory']!r}")
        linked[name] = package["relative_path"]
        owners[name] = package["directory"]
    return linked


def revert_local_paths(
    entries: Dict[str, Any] | None, fallback_version: str, marker: str = "file:"
) -> int:
    """Replace local path specifiers with the fallback version, in place.

    Args:
        entries: Package name to version specifier mapping, may be None
        fallback_version: Version substituted for local path specifiers
        marker: Prefix that identifies a local path specifier

    Returns:
        Number of rewritten entries
    """
    if entries is None:
        return 0
    if not isinstance(entries, dict):
        raise SchemaError(
            f"Expected a mapping of package versions, got {type(entries).__name__}"
        )

    reverted = 0
    for name, value in entries.items():
        if isinstance(value, str) and value.startswith(marker):
            logger.debug(f"Reverting {name}: {value} -> {fallback_version}")
            entries[name] = fallback_version
            reverted += 1
    return reverted


def install_linked_packages(
    manifest: Dict[str, Any], linked: Dict[str, str], config: LinkerConfig
) -> None:
    """Replace the linking field of the manifest with ``linked``.

    The namespace object must already exist; it is never created here.
    """
    namespace = manifest.get(config.namespace_key)
    if not isinstance(namespace, dict):
        raise SchemaError(
            f"Manifest has no {config.namespace_key!r} object to hold "
            f"{config.linking_field!r}"
        )
    namespace[config.linking_field] = dict(linked)
