"""Exceptions raised while publishing an app release."""


class AppReleaseError(Exception):
    """Base class for all release publishing failures."""


class ConfigError(AppReleaseError):
    """A required configuration input is missing or invalid."""


class MissingReleaseId(ConfigError):
    """No release identifier was supplied."""

    def __init__(self, message: str = "Release ID not found"):
        super().__init__(message)


class RemoteFetchError(AppReleaseError):
    """Custom exception for failed GitHub API calls."""

    def __init__(
        self, message: str, status_code: int | None = None, body: str | None = None
    ):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class AssetsDirectoryError(AppReleaseError):
    """The assets directory is missing or holds no files."""


class ManifestError(AppReleaseError):
    """Base class for package inspection failures."""


class ManifestNotFound(ManifestError):
    """No plugin or theme package exists in the assets listing."""


class ArchiveOpenError(ManifestError):
    """The selected package could not be read as a ZIP archive."""


class ManifestMissing(ManifestError):
    """The package archive does not contain its manifest file."""


class ManifestParseError(ManifestError):
    """The manifest is not valid YAML or lacks spec.requires/spec.version."""


class MissingManifest(AppReleaseError):
    """A release was requested without a package manifest."""

    def __init__(self, message: str = "App manifest not found"):
        super().__init__(message)


class RemoteCreateError(AppReleaseError):
    """The store rejected the release creation request."""

    def __init__(
        self, message: str, status_code: int | None = None, body: str | None = None
    ):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class AssetMissing(AppReleaseError):
    """An asset file disappeared between listing and upload."""


class AssetUploadError(AppReleaseError):
    """The store rejected an asset upload."""

    def __init__(
        self,
        asset: str,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
    ):
        self.asset = asset
        self.status_code = status_code
        self.body = body
        super().__init__(message)
