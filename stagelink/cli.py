import fire
import yaml
import logging

from .config import LinkerConfig, load_linker_config
from .errors import LinkerError
from .linker import ManifestLinker

logger = logging.getLogger(__name__)


def setup_logging(log_level: str) -> None:
    """Configure logging with the specified level."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def update_staging(
    root_dir: str | None = None,
    staging_manifest: str | None = None,
    packages_dir: str | None = None,
    dry_run: bool = False,
    log_level: str = "INFO",
) -> None:
    """
    Link local packages into the staging manifest, reverting file: dependencies.

    Args:
        root_dir: Repository root that relative paths are resolved against. If None, uses the config value.
        staging_manifest: Path of the staging manifest to rewrite. If None, uses the config value.
        packages_dir: Directory holding one subdirectory per local package. If None, uses the config value.
        dry_run: If True, report the changes without writing the manifest
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    setup_logging(log_level)
    try:
        config = load_linker_config(
            root_dir=root_dir,
            staging_manifest=staging_manifest,
            packages_dir=packages_dir,
        )
        ManifestLinker(config).run(dry_run=dry_run)
    except LinkerError as e:
        logger.error(f"Failed to update staging manifest: {e}")
        raise SystemExit(1) from e


class LinkerCLI:
    def link(
        self,
        root_dir: str | None = None,
        staging_manifest: str | None = None,
        packages_dir: str | None = None,
        dry_run: bool = False,
        log_level: str = "INFO",
    ) -> None:
        """
        Link local packages into the staging manifest.

        Args:
            root_dir: Repository root that relative paths are resolved against. If None, uses the config value.
            staging_manifest: Path of the staging manifest to rewrite. If None, uses the config value.
            packages_dir: Directory holding one subdirectory per local package. If None, uses the config value.
            dry_run: If True, report the changes without writing the manifest
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        """
        update_staging(
            root_dir=root_dir,
            staging_manifest=staging_manifest,
            packages_dir=packages_dir,
            dry_run=dry_run,
            log_level=log_level,
        )

    def show_config(self) -> str:
        """Print the effective configuration as YAML."""
        config: LinkerConfig = load_linker_config()
        return yaml.safe_dump(config.model_dump(mode="json"), sort_keys=False)


def main() -> None:
    fire.Fire(LinkerCLI)


def update_staging_main() -> None:
    fire.Fire(update_staging)


if __name__ == "__main__":
    main()
