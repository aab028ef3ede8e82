"""Reads the plugin or theme manifest embedded in a package archive."""

import logging
import zipfile
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from app_release.errors import (
    ArchiveOpenError,
    ManifestMissing,
    ManifestNotFound,
    ManifestParseError,
)
from app_release.models import PackageKind, PackageManifest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageLayout:
    """Where a package kind keeps its manifest."""

    extension: str
    manifest_name: str


# Insertion order is selection precedence: plugins win over themes.
PACKAGE_LAYOUTS: dict[PackageKind, PackageLayout] = {
    PackageKind.PLUGIN: PackageLayout(extension=".jar", manifest_name="plugin.yaml"),
    PackageKind.THEME: PackageLayout(extension=".zip", manifest_name="theme.yaml"),
}


class ManifestReader:
    """Locates the package archive among the assets and reads its manifest."""

    def __init__(self, assets_dir: str):
        """Initialize the manifest reader.

        Args:
            assets_dir: Directory the asset names are relative to
        """
        self.assets_dir = Path(assets_dir)

    def select_package(self, assets: list[str]) -> tuple[PackageKind, str]:
        """Pick the package archive to read the manifest from.

        Args:
            assets: Asset file names from the assets directory listing

        Returns:
            Tuple of the package kind and the selected file name

        Raises:
            ManifestNotFound: If no asset has a recognized package extension
        """
        candidates = {
            kind: [asset for asset in assets if asset.endswith(layout.extension)]
            for kind, layout in PACKAGE_LAYOUTS.items()
        }
        found = [kind for kind, files in candidates.items() if files]

        if not found:
            raise ManifestNotFound("No jar or zip file found in assets directory")

        kind = found[0]
        selected = candidates[kind][0]

        if len(found) > 1:
            ignored = [name for other in found[1:] for name in candidates[other]]
            logger.warning(
                f"Both plugin and theme packages found, using {kind.value} "
                f"package {selected} and ignoring {', '.join(ignored)}"
            )
        if len(candidates[kind]) > 1:
            logger.warning(
                f"Multiple {kind.value} packages found, using {selected}: "
                f"{', '.join(candidates[kind])}"
            )

        logger.info(f"Found {kind.value} file: {selected}")
        return kind, selected

    def read_manifest(self, assets: list[str]) -> PackageManifest:
        """Read requires/version from the package manifest.

        Args:
            assets: Asset file names from the assets directory listing

        Returns:
            PackageManifest for the selected package

        Raises:
            ManifestNotFound: If no package archive is present
            ArchiveOpenError: If the archive cannot be opened
            ManifestMissing: If the archive has no manifest entry
            ManifestParseError: If the manifest is malformed or incomplete
        """
        logger.info("Read app manifest")

        kind, filename = self.select_package(assets)
        layout = PACKAGE_LAYOUTS[kind]
        archive_path = self.assets_dir / filename

        content = self._read_entry(archive_path, kind, layout.manifest_name)
        data = self._parse_yaml(content, layout.manifest_name)
        requires, version = self._extract_spec(data, layout.manifest_name)

        logger.info(
            f"Successfully read app manifest (version: {version}, requires: {requires})"
        )
        return PackageManifest(
            kind=kind, requires=requires, version=version, source=str(archive_path)
        )

    def _read_entry(
        self, archive_path: Path, kind: PackageKind, manifest_name: str
    ) -> str:
        """Read the manifest entry of an archive as UTF-8 text."""
        try:
            with zipfile.ZipFile(archive_path) as archive:
                try:
                    raw = archive.read(manifest_name)
                except KeyError:
                    raise ManifestMissing(
                        f"{kind.value.capitalize()} package does not contain "
                        f"{manifest_name} file"
                    ) from None
        # zlib.error: corrupt deflate data; RuntimeError: encrypted entry;
        # NotImplementedError: unsupported compression method
        except (
            zipfile.BadZipFile,
            zlib.error,
            RuntimeError,
            NotImplementedError,
            OSError,
        ) as e:
            raise ArchiveOpenError(
                f"Failed to read package archive {archive_path.name}: {e}"
            ) from e

        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ManifestParseError(f"{manifest_name} is not valid UTF-8: {e}") from e

    def _parse_yaml(self, content: str, manifest_name: str) -> dict[str, Any]:
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ManifestParseError(f"Failed to parse {manifest_name}: {e}") from e

        if not isinstance(data, dict):
            raise ManifestParseError(f"{manifest_name} is not a YAML mapping")
        return data

    def _extract_spec(self, data: dict[str, Any], manifest_name: str) -> tuple[str, str]:
        spec = data.get("spec")
        if not isinstance(spec, dict):
            raise ManifestParseError(f"{manifest_name} has no spec section")

        missing = [key for key in ("requires", "version") if spec.get(key) is None]
        if missing:
            raise ManifestParseError(
                f"{manifest_name} is missing required fields: "
                f"{', '.join(f'spec.{key}' for key in missing)}"
            )

        return str(spec["requires"]), str(spec["version"])
