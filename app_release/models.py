"""Data models for the app release publisher."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass
class RepoInfo:
    """GitHub repository descriptor."""

    owner: str
    name: str
    private: bool

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "RepoInfo":
        """Create RepoInfo from a GitHub repository payload."""
        owner = data.get("owner")
        return cls(
            owner=owner.get("login", "") if isinstance(owner, dict) else "",
            name=data.get("name", ""),
            private=bool(data.get("private", False)),
        )


@dataclass(frozen=True)
class ReleaseInfo:
    """Information about a GitHub release."""

    name: str | None
    body: str
    tag_name: str
    html_url: str
    prerelease: bool

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ReleaseInfo":
        """Create ReleaseInfo from a GitHub release payload."""
        return cls(
            name=data.get("name"),
            body=data.get("body") or "",
            tag_name=data["tag_name"],
            html_url=data["html_url"],
            prerelease=bool(data.get("prerelease", False)),
        )

    @property
    def display_name(self) -> str:
        """Release title, or the tag name for untitled releases."""
        return self.name or self.tag_name


@dataclass(frozen=True)
class ReleaseNote:
    """Release notes in both rendered and raw form."""

    html: str
    markdown: str


class PackageKind(str, Enum):
    """Kind of package an assets directory ships."""

    PLUGIN = "plugin"
    THEME = "theme"


@dataclass(frozen=True)
class PackageManifest:
    """Fields read from a package's embedded manifest."""

    kind: PackageKind
    requires: str
    version: str
    source: str


@dataclass
class AppRelease:
    """Release record returned by the store."""

    name: str
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "AppRelease":
        """Create AppRelease from the store's creation response.

        Raises:
            KeyError: If the response has no metadata.name
        """
        return cls(name=data["metadata"]["name"], raw=data)


@dataclass(frozen=True)
class AssetFile:
    """A build artifact in the assets directory."""

    name: str
    path: str
