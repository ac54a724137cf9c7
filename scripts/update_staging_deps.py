"""Point jupyterlab/staging/package.json at the local packages, like dev_mode.

Run from the repository root; paths come from config.yaml.
"""

from stagelink.cli import update_staging_main

if __name__ == "__main__":
    update_staging_main()
