"""Configuration and logging setup for the app release publisher."""

import logging
import os
import sys
from dataclasses import dataclass

from app_release.errors import ConfigError

logger = logging.getLogger(__name__)

# Environment variable names
ENV_LOG_LEVEL = "LOG_LEVEL"
ENV_GITHUB_REPOSITORY = "GITHUB_REPOSITORY"
ENV_GITHUB_API_URL = "GITHUB_API_URL"
ENV_GITHUB_ACTIONS = "GITHUB_ACTIONS"

DEFAULT_STORE_BASE_URL = "https://www.kunkunyu.com"
DEFAULT_GITHUB_API_URL = "https://api.github.com"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"

# HTTP client loggers kept at WARNING whatever the run's level
QUIET_LOGGERS = ("urllib3", "requests")


def setup_logging(level: str | None = None) -> int:
    """Send log records to stdout, where the workflow log picks them up.

    The level comes from ``level``, then ``$LOG_LEVEL``, then INFO. An
    unknown level name falls back to INFO with a warning instead of failing
    the run.

    Returns:
        The numeric level in effect
    """
    requested = (level or os.getenv(ENV_LOG_LEVEL) or "INFO").strip().upper()
    log_level = logging.getLevelName(requested)
    unknown = not isinstance(log_level, int)
    if unknown:
        log_level = logging.INFO

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if unknown:
        logger.warning(f"Unknown log level {requested!r}, using INFO")
    return log_level


def get_env(*names: str, default: str = "") -> str:
    """Return the first non-blank environment variable among ``names``."""
    for name in names:
        value = os.getenv(name, "").strip()
        if value:
            return value
    return default


def get_input(name: str, *fallbacks: str) -> str:
    """Read a GitHub Actions input, then any fallback environment variables.

    The runner exposes an input ``app-id`` as ``INPUT_APP-ID``.
    """
    return get_env(f"INPUT_{name.replace(' ', '_').upper()}", *fallbacks)


@dataclass(frozen=True)
class ReleaseInput:
    """Inputs of a single publishing run.

    Attributes:
        owner: GitHub repository owner
        repo: GitHub repository name
        release_id: Numeric GitHub release id, None when not supplied
        app_id: Store application identifier
        assets_dir: Directory holding the built release assets
        github_token: Token for the GitHub API
        store_token: Bearer token for the store API
        store_base_url: Base URL of the store API
        github_api_url: Base URL of the GitHub API
    """

    owner: str
    repo: str
    release_id: int | None
    app_id: str
    assets_dir: str
    github_token: str
    store_token: str
    store_base_url: str = DEFAULT_STORE_BASE_URL
    github_api_url: str = DEFAULT_GITHUB_API_URL

    @property
    def repository(self) -> str:
        return f"{self.owner}/{self.repo}"


def parse_release_id(value: str | int | None) -> int | None:
    """Convert a release id input to an int, keeping absent values as None.

    Raises:
        ConfigError: If the value is present but not numeric
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Release ID must be numeric, got: {value!r}") from None


def parse_repository(value: str) -> tuple[str, str]:
    """Split an ``owner/repo`` string.

    Raises:
        ConfigError: If the value is not in owner/repo form
    """
    owner, _, repo = (value or "").strip().partition("/")
    if not owner or not repo or "/" in repo:
        raise ConfigError(
            f"Repository must be in 'owner/repo' format, got: {value!r}"
        )
    return owner, repo


def load_config(
    *,
    repository: str,
    release_id: str | int | None,
    app_id: str,
    assets_dir: str,
    github_token: str,
    store_token: str,
    store_base_url: str | None = None,
    github_api_url: str | None = None,
) -> ReleaseInput:
    """Validate raw inputs and build the run configuration.

    A missing release id is left as None; the orchestrator rejects it before
    making any network call.

    Raises:
        ConfigError: If a required input is missing or malformed
    """
    required = {
        "github-token": github_token,
        "yunext-pat": store_token,
        "app-id": app_id,
        "assets-dir": assets_dir,
    }
    missing = [name for name, value in required.items() if not value]
    if missing:
        raise ConfigError(f"Missing required inputs: {', '.join(missing)}")

    owner, repo = parse_repository(repository)

    return ReleaseInput(
        owner=owner,
        repo=repo,
        release_id=parse_release_id(release_id),
        app_id=app_id,
        assets_dir=assets_dir,
        github_token=github_token,
        store_token=store_token,
        store_base_url=(store_base_url or DEFAULT_STORE_BASE_URL).rstrip("/"),
        github_api_url=(github_api_url or DEFAULT_GITHUB_API_URL).rstrip("/"),
    )
