"""HTTP client for the app store developer API."""

import logging
from typing import Any, BinaryIO

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from app_release.config import DEFAULT_STORE_BASE_URL

logger = logging.getLogger(__name__)

API_PREFIX = "/apis/uc.api.developer.store.kunkunyu.com/v1alpha1"


class StoreClient:
    """Bearer-authenticated client for release creation and asset uploads.

    Methods return the raw response; callers decide which errors to raise.
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_STORE_BASE_URL,
        timeout: float | None = None,
        pool_size: int = 10,
    ):
        """Initialize the store client.

        Args:
            token: Personal access token for the store
            base_url: Store API base URL
            timeout: Request timeout in seconds, None for no timeout
            pool_size: Connections kept per host, at least the upload concurrency
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = self._create_session(token, pool_size)

        logger.info(f"Initialized StoreClient for {self.base_url}")

    def _create_session(self, token: str, pool_size: int) -> requests.Session:
        session = requests.Session()
        session.headers.update({"Authorization": f"Bearer {token}"})

        # Uploads are not idempotent, never retry them
        adapter = HTTPAdapter(
            max_retries=Retry(total=0, raise_on_status=False),
            pool_connections=pool_size,
            pool_maxsize=pool_size,
        )
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def releases_url(self, app_id: str) -> str:
        return f"{self.base_url}{API_PREFIX}/applications/{app_id}/releases"

    def upload_url(self) -> str:
        return f"{self.base_url}{API_PREFIX}/assets/-/upload"

    def create_release(self, app_id: str, payload: dict[str, Any]) -> requests.Response:
        """POST a release creation request.

        Raises:
            requests.RequestException: On transport failures
        """
        return self.session.post(
            self.releases_url(app_id), json=payload, timeout=self.timeout
        )

    def upload_asset(
        self, release_name: str, filename: str, stream: BinaryIO
    ) -> requests.Response:
        """POST one asset as multipart form data.

        Raises:
            requests.RequestException: On transport failures
        """
        return self.session.post(
            self.upload_url(),
            data={"releaseName": release_name},
            files={"file": (filename, stream, "application/octet-stream")},
            timeout=self.timeout,
        )
