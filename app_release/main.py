"""Main entry point for publishing a GitHub release to the app store."""

import argparse
import logging
import os
import sys

import requests

from app_release.asset_uploader import MAX_UPLOAD_WORKERS, AssetUploader
from app_release.config import (
    ENV_GITHUB_ACTIONS,
    ENV_GITHUB_API_URL,
    ENV_GITHUB_REPOSITORY,
    ENV_LOG_LEVEL,
    ReleaseInput,
    get_env,
    get_input,
    load_config,
    setup_logging,
)
from app_release.errors import AppReleaseError, MissingReleaseId
from app_release.manifest_reader import ManifestReader
from app_release.metadata_client import MetadataClient
from app_release.models import AppRelease
from app_release.release_creator import ReleaseCreator
from app_release.store_client import StoreClient
from app_release.utils import list_assets

logger = logging.getLogger(__name__)


def run(
    config: ReleaseInput,
    metadata_client: MetadataClient | None = None,
    store_client: StoreClient | None = None,
) -> AppRelease:
    """Publish one GitHub release to the app store.

    Stages run in order and the first failure aborts the rest. Assets that
    were already uploaded are not rolled back.

    Args:
        config: Inputs of this run
        metadata_client: GitHub client, created from config when None
        store_client: Store client, created from config when None

    Returns:
        The created app release

    Raises:
        AppReleaseError: On any stage failure
    """
    if config.release_id is None:
        raise MissingReleaseId()

    metadata_client = metadata_client or MetadataClient(
        config.github_token, base_url=config.github_api_url
    )

    repo_info = metadata_client.get_repo_info(config.owner, config.repo)
    release_info = metadata_client.get_release_info(
        config.owner, config.repo, config.release_id
    )
    note = metadata_client.build_release_note(
        config.owner, config.repo, repo_info, release_info
    )

    assets = list_assets(config.assets_dir)
    manifest = ManifestReader(config.assets_dir).read_manifest(assets)

    store_client = store_client or StoreClient(
        config.store_token,
        base_url=config.store_base_url,
        pool_size=min(max(len(assets), 1), MAX_UPLOAD_WORKERS),
    )

    app_release = ReleaseCreator(store_client, config.app_id).create_release(
        release_info, note, manifest
    )
    AssetUploader(store_client, config.assets_dir).upload_assets(
        app_release.name, assets
    )

    return app_release


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser; defaults come from action inputs or env."""
    parser = argparse.ArgumentParser(
        prog="app-release",
        description="Publish a GitHub release and its assets to the app store.",
    )
    parser.add_argument(
        "--github-token",
        default=get_input("github-token", "GITHUB_TOKEN"),
        help="GitHub token (default: $INPUT_GITHUB-TOKEN or $GITHUB_TOKEN)",
    )
    parser.add_argument(
        "--store-token",
        default=get_input("yunext-pat", "STORE_TOKEN"),
        help="App store personal access token",
    )
    parser.add_argument(
        "--app-id",
        default=get_input("app-id", "APP_ID"),
        help="App store application id",
    )
    parser.add_argument(
        "--release-id",
        default=get_input("release-id", "RELEASE_ID"),
        help="Numeric GitHub release id",
    )
    parser.add_argument(
        "--assets-dir",
        default=get_input("assets-dir", "ASSETS_DIR"),
        help="Directory with the built release assets",
    )
    parser.add_argument(
        "--store-base-url",
        default=get_input("yunext-backend-baseurl", "STORE_BASE_URL"),
        help="App store API base URL",
    )
    parser.add_argument(
        "--repository",
        default=get_env(ENV_GITHUB_REPOSITORY),
        help="GitHub repository as owner/repo (default: $GITHUB_REPOSITORY)",
    )
    parser.add_argument(
        "--github-api-url",
        default=get_env(ENV_GITHUB_API_URL),
        help="GitHub API base URL (default: $GITHUB_API_URL)",
    )
    parser.add_argument(
        "--log-level",
        default=get_env(ENV_LOG_LEVEL, default="INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
    )
    return parser


def _report_failure(message: str) -> None:
    logger.error(f"[Failed]: {message}")
    if os.getenv(ENV_GITHUB_ACTIONS) == "true":
        # Workflow command marking the step as failed in the run summary
        print(f"::error::[Failed]: {message}", flush=True)


def main(argv: list[str] | None = None) -> int:
    """Command line entry point.

    Returns:
        Process exit code, 0 on success and 1 on failure
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        config = load_config(
            repository=args.repository,
            release_id=args.release_id,
            app_id=args.app_id,
            assets_dir=args.assets_dir,
            github_token=args.github_token,
            store_token=args.store_token,
            store_base_url=args.store_base_url,
            github_api_url=args.github_api_url,
        )
        run(config)
    except (AppReleaseError, requests.RequestException) as e:
        _report_failure(str(e))
        return 1
    except Exception as e:
        logger.debug("Unexpected failure", exc_info=True)
        _report_failure(str(e) or type(e).__name__)
        return 1

    logger.info("[Completed]: App release created successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
