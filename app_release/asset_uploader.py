"""Uploads release assets to the app store concurrently."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

import requests

from app_release.errors import AssetMissing, AssetUploadError
from app_release.models import AssetFile
from app_release.store_client import StoreClient

logger = logging.getLogger(__name__)

# Upper bound on parallel uploads and pooled store connections
MAX_UPLOAD_WORKERS = 8


class AssetUploader:
    """Uploads every asset of a release, failing on the first rejected upload."""

    def __init__(
        self,
        store_client: StoreClient,
        assets_dir: str,
        max_workers: int | None = None,
    ):
        """Initialize the asset uploader.

        Args:
            store_client: Authenticated store API client
            assets_dir: Directory the asset names are relative to
            max_workers: Upload concurrency, defaults to one worker per asset
                up to MAX_UPLOAD_WORKERS
        """
        self.store_client = store_client
        self.assets_dir = Path(assets_dir)
        self.max_workers = max_workers

    def upload_assets(self, release_name: str, assets: list[str]) -> None:
        """Upload all assets and attach them to a release.

        Uploads run in parallel. When one fails, uploads that have not
        started yet are skipped, in-flight uploads are waited for, and the
        first failure is re-raised unchanged.

        Args:
            release_name: Generated name of the created app release
            assets: Asset file names from the assets directory listing

        Raises:
            AssetMissing: If an asset file vanished before its upload
            AssetUploadError: If the store rejects an upload
        """
        total = len(assets)
        logger.info(f"Uploading {total} assets")
        if not assets:
            return

        files = [AssetFile(name=name, path=str(self.assets_dir / name)) for name in assets]
        abort = threading.Event()
        workers = self.max_workers or min(total, MAX_UPLOAD_WORKERS)

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="upload") as executor:
            futures = [
                executor.submit(self._upload_one, release_name, asset, index, total, abort)
                for index, asset in enumerate(files, start=1)
            ]

            try:
                for future in as_completed(futures):
                    future.result()
            except Exception:
                abort.set()
                for pending in futures:
                    pending.cancel()
                # Leaving the with block waits for in-flight uploads
                raise

        logger.info("All assets uploaded")

    def _upload_one(
        self,
        release_name: str,
        asset: AssetFile,
        index: int,
        total: int,
        abort: threading.Event,
    ) -> None:
        if abort.is_set():
            logger.info(f"Skipping upload of {asset.name} after an earlier failure")
            return

        try:
            self._upload_file(release_name, asset, index, total)
        except Exception:
            abort.set()
            raise

    def _upload_file(
        self, release_name: str, asset: AssetFile, index: int, total: int
    ) -> None:
        path = Path(asset.path)
        if not path.is_file():
            raise AssetMissing(f"Asset file does not exist: {asset.path}")

        logger.info(f"Uploading file ({index}/{total}): {asset.name}")

        try:
            with open(path, "rb") as stream:
                response = self.store_client.upload_asset(release_name, asset.name, stream)
        except requests.RequestException as e:
            raise AssetUploadError(
                asset.name, f"Failed to upload file {asset.name}: {e}"
            ) from e
        except OSError as e:
            raise AssetMissing(f"Asset file cannot be read: {asset.path}: {e}") from e

        if not response.ok:
            body = response.text[:500]
            raise AssetUploadError(
                asset.name,
                f"Failed to upload file {asset.name}: HTTP {response.status_code} {body}",
                status_code=response.status_code,
                body=body,
            )

        logger.info(f"Successfully uploaded file: {asset.name}")
