"""Registers a new release with the app store."""

import logging
from typing import Any

import requests

from app_release.errors import MissingManifest, RemoteCreateError
from app_release.models import AppRelease, PackageManifest, ReleaseInfo, ReleaseNote
from app_release.store_client import StoreClient

logger = logging.getLogger(__name__)

STORE_API_VERSION = "store.kunkunyu.com/v1alpha1"


def build_release_request(
    release_info: ReleaseInfo, note: ReleaseNote, manifest: PackageManifest
) -> dict[str, Any]:
    """Build the release + notes creation payload.

    Names left empty are generated by the store from ``generateName``.
    """
    return {
        "release": {
            "apiVersion": STORE_API_VERSION,
            "kind": "Release",
            "metadata": {"generateName": "app-release-", "name": ""},
            "spec": {
                "applicationName": "",
                "displayName": release_info.display_name,
                "draft": False,
                "ownerName": "",
                "preRelease": release_info.prerelease,
                "requires": manifest.requires,
                "version": manifest.version,
                "notesName": "",
            },
        },
        "notes": {
            "apiVersion": STORE_API_VERSION,
            "html": note.html,
            "kind": "Content",
            "metadata": {"generateName": "app-release-notes-", "name": ""},
            "rawType": "MARKDOWN",
            "raw": note.markdown,
        },
        "makeLatest": True,
    }


class ReleaseCreator:
    """Creates app releases through the store API."""

    def __init__(self, store_client: StoreClient, app_id: str):
        """Initialize the release creator.

        Args:
            store_client: Authenticated store API client
            app_id: Application the releases belong to
        """
        self.store_client = store_client
        self.app_id = app_id

    def create_release(
        self,
        release_info: ReleaseInfo,
        note: ReleaseNote,
        manifest: PackageManifest | None,
    ) -> AppRelease:
        """Create the release and return the store's record.

        Raises:
            MissingManifest: If no manifest was read
            RemoteCreateError: If the store rejects the request
        """
        logger.info("Create app release")

        if manifest is None:
            raise MissingManifest()

        payload = build_release_request(release_info, note, manifest)

        try:
            response = self.store_client.create_release(self.app_id, payload)
        except requests.RequestException as e:
            logger.error(f"Failed to create app release: {e}")
            raise RemoteCreateError(f"Failed to create app release: {e}") from e

        if not response.ok:
            body = response.text[:500]
            logger.error(f"Failed to create app release (status: {response.status_code})")
            raise RemoteCreateError(
                f"Failed to create app release: HTTP {response.status_code} {body}",
                status_code=response.status_code,
                body=body,
            )

        try:
            app_release = AppRelease.from_api(response.json())
        except (ValueError, KeyError, TypeError) as e:
            raise RemoteCreateError(
                f"Unexpected app release response: {e}",
                status_code=response.status_code,
                body=response.text[:500],
            ) from e

        logger.info(f"Successfully created app release: {app_release.name}")
        return app_release
