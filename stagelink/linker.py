from dataclasses import dataclass
from pathlib import Path
import logging

from .config import LinkerConfig
from .storage import ManifestStore
from .utils.manifest import (
    build_linked_packages,
    discover_local_packages,
    install_linked_packages,
    revert_local_paths,
)

# Set up logging
logger = logging.getLogger(__name__)


@dataclass
class LinkResult:
    packages_found: int
    dependencies_reverted: int
    resolutions_reverted: int
    linked_packages: int
    output_path: Path
    written: bool


class ManifestLinker:
    def __init__(self, config: LinkerConfig, store: ManifestStore | None = None):
        """
        Initialize the ManifestLinker.

        Args:
            config: Linker configuration
            store: Manifest reader/writer, a default ManifestStore if None
        """
        self.config = config
        self.store = store or ManifestStore()

    def run(self, dry_run: bool = False) -> LinkResult:
        """Link local packages into the staging manifest and rewrite it.

        Everything is read and computed before the single write, so a
        failure leaves the staging manifest untouched.

        Args:
            dry_run: Compute and report the changes without writing

        Returns:
            Summary of the run
        """
        config = self.config
        manifest_path = config.staging_manifest_path
        packages_dir = config.packages_path

        manifest = self.store.load_manifest(manifest_path)

        directories = discover_local_packages(packages_dir, config)
        linked = build_linked_packages(packages_dir, directories, config, self.store)
        logger.info(f"Found {len(directories)} local packages")

        dependencies_reverted = revert_local_paths(
            manifest.get("dependencies"),
            config.fallback_version,
            config.local_path_marker,
        )
        logger.info(
            f"Reverted {dependencies_reverted} dependencies from "
            f"{config.local_path_marker} paths"
        )

        resolutions_reverted = revert_local_paths(
            manifest.get("resolutions"),
            config.fallback_version,
            config.local_path_marker,
        )
        logger.info(
            f"Reverted {resolutions_reverted} resolutions from "
            f"{config.local_path_marker} paths"
        )

        install_linked_packages(manifest, linked, config)
        logger.info(f"Set {len(linked)} {config.linking_field}")

        if dry_run:
            logger.info(f"Dry run, not writing {manifest_path}")
        else:
            self.store.write_manifest(manifest_path, manifest)
            logger.info(f"Updated {manifest_path}")

        return LinkResult(
            packages_found=len(directories),
            dependencies_reverted=dependencies_reverted,
            resolutions_reverted=resolutions_reverted,
            linked_packages=len(linked),
            output_path=manifest_path,
            written=not dry_run,
        )
