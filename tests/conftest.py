"""Shared fixtures for app release tests."""

import zipfile
from pathlib import Path

import pytest

PLUGIN_YAML = """\
apiVersion: plugin.halo.run/v1alpha1
kind: Plugin
metadata:
  name: plugin-demo
spec:
  requires: "2.0.0"
  version: "1.2.3"
  displayName: Demo
"""

THEME_YAML = """\
apiVersion: theme.halo.run/v1alpha1
kind: Theme
metadata:
  name: theme-demo
spec:
  requires: ">=2.10.0"
  version: 0.4.1
"""


def write_package(path: Path, entries: dict[str, str | bytes]) -> Path:
    """Write a ZIP archive with the given entry names and contents."""
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, content in entries.items():
            archive.writestr(name, content)
    return path


@pytest.fixture
def make_package():
    """Factory writing ZIP archives, see write_package."""
    return write_package


@pytest.fixture
def plugin_yaml():
    return PLUGIN_YAML


@pytest.fixture
def theme_yaml():
    return THEME_YAML


@pytest.fixture
def assets_dir(tmp_path):
    """Empty assets directory."""
    directory = tmp_path / "assets"
    directory.mkdir()
    return directory


@pytest.fixture
def plugin_assets(assets_dir):
    """Assets directory with a plugin jar and a checksum file."""
    write_package(assets_dir / "plugin-1.jar", {"plugin.yaml": PLUGIN_YAML})
    (assets_dir / "plugin-1.jar.sha256").write_text("abc123  plugin-1.jar\n")
    return assets_dir
