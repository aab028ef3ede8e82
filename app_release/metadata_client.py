"""GitHub client for fetching repository and release information."""

import logging
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from app_release.config import DEFAULT_GITHUB_API_URL
from app_release.errors import RemoteFetchError
from app_release.models import ReleaseInfo, ReleaseNote, RepoInfo

logger = logging.getLogger(__name__)

GITHUB_API_VERSION = "2022-11-28"


def compose_release_markdown(
    body: str, private: bool, tag_name: str, html_url: str
) -> str:
    """Assemble the raw markdown release notes.

    A horizontal rule follows a non-empty body. Public repositories get an
    attribution line linking back to the GitHub release, even when the body
    is empty.

    Examples:
        >>> compose_release_markdown("Fixed bugs", False, "v1.0", "https://x")
        'Fixed bugs\\n\\n---\\n\\n*Generated from [v1.0](https://x)*'
        >>> compose_release_markdown("", True, "v1.0", "https://x")
        ''
    """
    markdown = body or ""

    if markdown:
        markdown += "\n\n---"

    if not private:
        markdown += f"\n\n*Generated from [{tag_name}]({html_url})*"

    return markdown


class MetadataClient:
    """Client for the GitHub repository, release and markdown APIs."""

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_GITHUB_API_URL,
        timeout: float | None = None,
    ):
        """Initialize the metadata client.

        Args:
            token: GitHub token used as bearer credential
            base_url: GitHub API base URL
            timeout: Request timeout in seconds, None for no timeout
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = self._create_session(token)

    def _create_session(self, token: str) -> requests.Session:
        """Create an authenticated requests session that never retries."""
        session = requests.Session()
        session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": GITHUB_API_VERSION,
            }
        )

        # A failed call aborts the run, so no retries
        adapter = HTTPAdapter(max_retries=Retry(total=0, raise_on_status=False))
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def _request(self, method: str, path: str, what: str, **kwargs: Any) -> requests.Response:
        """Send a request and convert every failure to RemoteFetchError."""
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url}")

        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Failed to fetch {what}: {e}")
            raise RemoteFetchError(f"Failed to fetch {what}: {e}") from e

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            body = response.text[:500]
            logger.error(f"Failed to fetch {what} (status: {response.status_code})")
            raise RemoteFetchError(
                f"Failed to fetch {what}: HTTP {response.status_code} {body}",
                status_code=response.status_code,
                body=body,
            ) from e

        return response

    def _json(self, response: requests.Response, what: str) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise RemoteFetchError(
                f"Failed to parse {what} response: {e}",
                status_code=response.status_code,
                body=response.text[:500],
            ) from e

        if not isinstance(data, dict):
            raise RemoteFetchError(
                f"Unexpected {what} response: expected a JSON object, "
                f"got {type(data).__name__}",
                status_code=response.status_code,
                body=response.text[:500],
            )
        return data

    def get_repo_info(self, owner: str, repo: str) -> RepoInfo:
        """Fetch the repository descriptor.

        Raises:
            RemoteFetchError: If the request fails
        """
        logger.info("Fetch GitHub repo info")

        response = self._request("GET", f"/repos/{owner}/{repo}", "repo info")
        repo_info = RepoInfo.from_api(self._json(response, "repo info"))

        logger.info(f"Successfully fetched repo info (private: {repo_info.private})")
        return repo_info

    def get_release_info(self, owner: str, repo: str, release_id: int) -> ReleaseInfo:
        """Fetch a release by its numeric id.

        Raises:
            RemoteFetchError: If the request fails or the payload is incomplete
        """
        logger.info("Fetch GitHub release info")

        response = self._request(
            "GET", f"/repos/{owner}/{repo}/releases/{release_id}", "release info"
        )
        data = self._json(response, "release info")
        try:
            release_info = ReleaseInfo.from_api(data)
        except KeyError as e:
            raise RemoteFetchError(f"Release info is missing field {e}") from e

        logger.info(f"Successfully fetched release info (tag: {release_info.tag_name})")
        return release_info

    def render_markdown(self, text: str, context: str) -> str:
        """Render GitHub-flavored markdown to HTML.

        Args:
            text: Markdown source
            context: ``owner/repo`` used to resolve issue and user references

        Raises:
            RemoteFetchError: If the request fails
        """
        response = self._request(
            "POST",
            "/markdown",
            "rendered markdown",
            json={"text": text, "mode": "gfm", "context": context},
        )
        return response.text

    def build_release_note(
        self, owner: str, repo: str, repo_info: RepoInfo, release_info: ReleaseInfo
    ) -> ReleaseNote:
        """Build the release notes in raw and rendered form.

        Raises:
            RemoteFetchError: If rendering fails
        """
        markdown = compose_release_markdown(
            release_info.body,
            repo_info.private,
            release_info.tag_name,
            release_info.html_url,
        )
        html = self.render_markdown(markdown, f"{owner}/{repo}")

        return ReleaseNote(html=html, markdown=markdown)
