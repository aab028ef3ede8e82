"""Utility functions for the app release publisher."""

import logging
from pathlib import Path

from app_release.errors import AssetsDirectoryError

logger = logging.getLogger(__name__)


def list_assets(assets_dir: str) -> list[str]:
    """List the release asset files in a directory.

    Only regular files are returned; subdirectories are ignored. Names are
    sorted so package selection and upload order do not depend on the
    filesystem's listing order.

    Args:
        assets_dir: Directory produced by the build step.

    Returns:
        Sorted list of file names (not paths).

    Raises:
        AssetsDirectoryError: If the directory does not exist or has no files.

    Examples:
        >>> list_assets("dist")  # doctest: +SKIP
        ['plugin-1.0.0.jar', 'plugin-1.0.0.jar.sha256']
    """
    directory = Path(assets_dir)
    if not directory.is_dir():
        raise AssetsDirectoryError(f"Assets directory does not exist: {assets_dir}")

    assets = sorted(entry.name for entry in directory.iterdir() if entry.is_file())
    if not assets:
        raise AssetsDirectoryError(f"Assets directory is empty: {assets_dir}")

    logger.info(f"Found {len(assets)} assets in {assets_dir}")
    return assets
