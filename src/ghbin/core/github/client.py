"""Release directory client for the GitHub REST API.

This module handles direct HTTP communication with GitHub's release
endpoints. Every call is a fresh request wrapped in
:func:`~ghbin.core.retry.with_retry`; nothing is cached between calls, so
asset listings always reflect the current state of the release.

Requirements:
    - aiohttp: HTTP transport (session injected by the caller)
    - aiofiles: chunked file I/O for uploads and downloads
    - orjson: JSON encoding and decoding
"""

import contextlib
import os
import tempfile
from collections.abc import AsyncIterator, Awaitable, Callable
from pathlib import Path
from typing import Any, TypeVar
from urllib.parse import quote

import aiofiles
import aiohttp
import orjson

from ghbin.constants import (
    CHUNK_SIZE,
    CONTENT_TYPES,
    DEFAULT_CONTENT_TYPE,
    GITHUB_API_URL,
    GITHUB_API_VERSION,
    GITHUB_UPLOADS_URL,
    HTTP_CLIENT_ERROR,
    HTTP_FORBIDDEN,
    HTTP_NOT_FOUND,
    USER_AGENT,
)
from ghbin.core.archive import archive_suffix
from ghbin.core.auth import RateLimitTracker
from ghbin.core.github.models import Asset, Release
from ghbin.core.retry import (
    RetryPolicy,
    error_from_exception,
    error_from_status,
    with_retry,
)
from ghbin.exceptions import (
    AuthenticationRequiredError,
    ReleaseNotFoundError,
    TransportError,
)
from ghbin.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

JSON_MEDIA_TYPE = "application/vnd.github+json"
BINARY_MEDIA_TYPE = "application/octet-stream"
PER_PAGE = 100
ERROR_DETAIL_MAX = 200


def get_content_type(path: Path | str) -> str:
    """Return the MIME type used when uploading ``path``."""
    name = Path(path).name.lower()
    for suffix, content_type in CONTENT_TYPES:
        if name.endswith(suffix):
            return content_type
    return DEFAULT_CONTENT_TYPE


async def _file_chunks(path: Path) -> AsyncIterator[bytes]:
    async with aiofiles.open(path, mode="rb") as f:
        while chunk := await f.read(CHUNK_SIZE):
            yield chunk


class ReleaseClient:
    """Reads and mutates releases and their assets for one GitHub host.

    Args:
        session: Open aiohttp session
        token: GitHub token; required for every write operation
        retry_policy: Backoff policy applied to each request
        api_url: REST API base URL
        uploads_url: Asset upload base URL

    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        token: str | None = None,
        retry_policy: RetryPolicy | None = None,
        api_url: str = GITHUB_API_URL,
        uploads_url: str = GITHUB_UPLOADS_URL,
    ) -> None:
        """Initialize the client with its injected collaborators."""
        self.session = session
        self.token = token
        self.retry_policy = retry_policy or RetryPolicy()
        self.api_url = api_url.rstrip("/")
        self.uploads_url = uploads_url.rstrip("/")
        self.rate_limit = RateLimitTracker()

    # ------------------------------------------------------------------
    # Request plumbing
    # ------------------------------------------------------------------

    def _headers(self, accept: str = JSON_MEDIA_TYPE) -> dict[str, str]:
        headers = {
            "Accept": accept,
            "User-Agent": USER_AGENT,
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _require_token(self, operation: str) -> None:
        if not self.token:
            msg = (
                f"{operation} needs a GitHub token "
                "(--token, GITHUB_TOKEN or 'ghbin token --save')"
            )
            raise AuthenticationRequiredError(msg)

    def _repo_url(self, owner: str, repo: str) -> str:
        return f"{self.api_url}/repos/{owner}/{repo}"

    async def _raise_for_status(
        self, response: aiohttp.ClientResponse
    ) -> None:
        """Convert an error response into a classified TransportError."""
        if response.status < HTTP_CLIENT_ERROR:
            return

        forbidden = response.status == HTTP_FORBIDDEN
        if forbidden and self.rate_limit.is_exhausted():
            msg = (
                "GitHub API rate limit exceeded; resets in "
                f"{self.rate_limit.reset_in_seconds()}s"
            )
            raise TransportError(msg, status=response.status, retryable=False)

        raw = await response.read()
        try:
            detail = orjson.loads(raw).get("message", "")
        except (orjson.JSONDecodeError, AttributeError):
            detail = raw.decode("utf-8", errors="replace")[:ERROR_DETAIL_MAX]
        detail = detail or response.reason or ""
        raise error_from_status(response.status, detail)

    async def _send(
        self,
        method: str,
        url: str,
        operation: str,
        handler: Callable[[aiohttp.ClientResponse], Awaitable[T]],
        *,
        params: dict[str, str] | None = None,
        accept: str = JSON_MEDIA_TYPE,
        extra_headers: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
        body_factory: Callable[[], Any] | None = None,
    ) -> T:
        """Issue one logical request with retries.

        ``body_factory`` is called once per attempt so streamed bodies
        start from the first byte again after a failure.
        """

        async def attempt() -> T:
            headers = self._headers(accept)
            if extra_headers:
                headers.update(extra_headers)
            data = None
            if body_factory is not None:
                data = body_factory()
            elif json_body is not None:
                data = orjson.dumps(json_body)
                headers["Content-Type"] = "application/json"

            try:
                async with self.session.request(
                    method, url, params=params, headers=headers, data=data
                ) as response:
                    self.rate_limit.update(response.headers)
                    return await handler(response)
            except (aiohttp.ClientError, TimeoutError) as e:
                raise error_from_exception(e) from e

        logger.debug("%s %s", method, url)
        return await with_retry(operation, self.retry_policy, attempt)

    async def _request_json(
        self,
        method: str,
        url: str,
        operation: str,
        *,
        allow_missing: bool = False,
        **kwargs: Any,
    ) -> Any:
        """Send a request and decode the JSON body.

        Returns:
            Decoded JSON, or None for an empty body or (with
            ``allow_missing``) a 404 response

        """

        async def handle(response: aiohttp.ClientResponse) -> Any:
            if allow_missing and response.status == HTTP_NOT_FOUND:
                return None
            await self._raise_for_status(response)
            raw = await response.read()
            if not raw:
                return None
            try:
                return orjson.loads(raw)
            except orjson.JSONDecodeError as e:
                msg = f"invalid JSON from {url}: {e}"
                raise TransportError(msg, status=response.status) from e

        return await self._send(method, url, operation, handle, **kwargs)

    async def _get_pages(self, url: str, operation: str) -> list[Any]:
        """Collect every page of a list endpoint.

        Pages are requested until one comes back with fewer than
        ``PER_PAGE`` items. Each page is retried on its own.
        """
        items: list[Any] = []
        page = 1
        while True:
            data = await self._request_json(
                "GET",
                url,
                f"{operation} (page {page})",
                params={"per_page": str(PER_PAGE), "page": str(page)},
            )
            batch = data or []
            items.extend(batch)
            if len(batch) < PER_PAGE:
                return items
            page += 1

    # ------------------------------------------------------------------
    # Releases
    # ------------------------------------------------------------------

    async def get_release(
        self, owner: str, repo: str, tag: str | None = None
    ) -> Release:
        """Fetch a release by tag, or the latest published release.

        Args:
            owner: Repository owner
            repo: Repository name
            tag: Release tag; None selects the latest non-draft,
                non-prerelease release

        Returns:
            The release

        Raises:
            ReleaseNotFoundError: If GitHub reports no such release
            RetryExhaustedError: On any other transport failure

        """
        if tag:
            url = f"{self._repo_url(owner, repo)}/releases/tags/{quote(tag)}"
        else:
            url = f"{self._repo_url(owner, repo)}/releases/latest"

        data = await self._request_json(
            "GET",
            url,
            f"get release {tag or 'latest'} of {owner}/{repo}",
            allow_missing=True,
        )
        if data is None:
            raise ReleaseNotFoundError(owner, repo, tag or "latest")
        return Release.from_api_response(data)

    async def list_releases(self, owner: str, repo: str) -> list[Release]:
        """Return every release, drafts included when visible."""
        data = await self._get_pages(
            f"{self._repo_url(owner, repo)}/releases",
            f"list releases of {owner}/{repo}",
        )
        return [Release.from_api_response(item) for item in data]

    async def create_or_get_release(
        self,
        owner: str,
        repo: str,
        tag: str,
        *,
        draft: bool = False,
        target_commitish: str | None = None,
        notes: str | None = None,
    ) -> Release:
        """Return the release for ``tag``, creating it if needed.

        An existing release is returned unchanged. Draft releases are not
        reachable through the tag endpoint, so the release listing is
        checked before creating a new one.

        Args:
            owner: Repository owner
            repo: Repository name
            tag: Tag to publish under; also used as the release name
            draft: Create the release as a draft
            target_commitish: Commit or branch for a tag that does not
                exist yet
            notes: Release body

        Returns:
            The existing or newly created release

        Raises:
            AuthenticationRequiredError: If no token is configured

        """
        self._require_token("Creating a release")

        try:
            release = await self.get_release(owner, repo, tag)
        except ReleaseNotFoundError:
            pass
        else:
            logger.info("Using existing release %s", tag)
            return release

        for release in await self.list_releases(owner, repo):
            if release.tag_name == tag:
                logger.info("Using existing draft release %s", tag)
                return release

        body: dict[str, Any] = {"tag_name": tag, "name": tag, "draft": draft}
        if target_commitish:
            body["target_commitish"] = target_commitish
        if notes:
            body["body"] = notes

        data = await self._request_json(
            "POST",
            f"{self._repo_url(owner, repo)}/releases",
            f"create release {tag}",
            json_body=body,
        )
        release = Release.from_api_response(data)
        logger.info("Created release %s (%s)", tag, release.html_url)
        return release

    async def generate_release_notes(
        self,
        owner: str,
        repo: str,
        tag: str,
        previous_tag: str | None = None,
        target_commitish: str | None = None,
    ) -> str:
        """Ask GitHub to generate notes for ``tag`` since ``previous_tag``."""
        self._require_token("Generating release notes")
        body: dict[str, Any] = {"tag_name": tag}
        if previous_tag:
            body["previous_tag_name"] = previous_tag
        if target_commitish:
            body["target_commitish"] = target_commitish

        data = await self._request_json(
            "POST",
            f"{self._repo_url(owner, repo)}/releases/generate-notes",
            f"generate notes for {tag}",
            json_body=body,
        )
        return (data or {}).get("body", "")

    # ------------------------------------------------------------------
    # Assets
    # ------------------------------------------------------------------

    async def list_assets(
        self, owner: str, repo: str, release_id: int
    ) -> list[Asset]:
        """Return all current assets of a release, across pages."""
        data = await self._get_pages(
            f"{self._repo_url(owner, repo)}/releases/{release_id}/assets",
            f"list assets of release {release_id}",
        )
        assets = (Asset.from_api_response(item) for item in data)
        return [asset for asset in assets if asset is not None]

    async def find_existing_asset(
        self, owner: str, repo: str, release_id: int, name: str
    ) -> Asset | None:
        """Return the asset called ``name`` on the release, if any."""
        for asset in await self.list_assets(owner, repo, release_id):
            if asset.name == name:
                return asset
        return None

    async def delete_asset(self, owner: str, repo: str, asset_id: int) -> None:
        """Delete an asset; an already missing asset is not an error."""
        self._require_token("Deleting an asset")
        await self._request_json(
            "DELETE",
            f"{self._repo_url(owner, repo)}/releases/assets/{asset_id}",
            f"delete asset {asset_id}",
            allow_missing=True,
        )
        logger.debug("Deleted asset %d", asset_id)

    async def upload_asset(
        self,
        owner: str,
        repo: str,
        release_id: int,
        file_path: Path,
        content_type: str | None = None,
    ) -> Asset:
        """Stream ``file_path`` to the release as a new asset.

        Args:
            owner: Repository owner
            repo: Repository name
            release_id: Target release id
            file_path: File to upload; its basename becomes the asset name
            content_type: MIME type (default: derived from the suffix)

        Returns:
            The created asset

        Raises:
            AuthenticationRequiredError: If no token is configured
            RetryExhaustedError: If the upload fails

        """
        self._require_token("Uploading an asset")
        size = file_path.stat().st_size
        url = (
            f"{self.uploads_url}/repos/{owner}/{repo}/releases/"
            f"{release_id}/assets"
        )

        data = await self._request_json(
            "POST",
            url,
            f"upload {file_path.name}",
            params={"name": file_path.name},
            extra_headers={
                "Content-Type": content_type or get_content_type(file_path),
                "Content-Length": str(size),
            },
            body_factory=lambda: _file_chunks(file_path),
        )
        asset = Asset.from_api_response(data or {})
        if asset is None:
            msg = f"unexpected upload response for {file_path.name}"
            raise TransportError(msg)
        logger.info("📦 Uploaded %s (%d bytes)", asset.name, size)
        return asset

    async def download_asset(
        self, asset: Asset, destination_dir: Path | None = None
    ) -> Path:
        """Stream an asset into a new temporary file.

        The temporary file keeps the asset's archive suffix so the archive
        codec can recognise it. Each attempt rewrites the file from the
        start; on failure the file is removed.

        Args:
            asset: Asset to download
            destination_dir: Directory for the temporary file
                (default: the system temp directory)

        Returns:
            Path of the downloaded file; the caller owns and deletes it

        Raises:
            RetryExhaustedError: If the download fails

        """
        fd, name = tempfile.mkstemp(
            prefix="ghbin-",
            suffix=archive_suffix(asset.name),
            dir=destination_dir,
        )
        os.close(fd)
        dest = Path(name)

        async def write_body(response: aiohttp.ClientResponse) -> int:
            await self._raise_for_status(response)
            written = 0
            async with aiofiles.open(dest, mode="wb") as f:
                async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                    if chunk:
                        await f.write(chunk)
                        written += len(chunk)
            return written

        url, accept = self._download_target(asset)
        try:
            written = await self._send(
                "GET", url, f"download {asset.name}", write_body, accept=accept
            )
        except BaseException:
            with contextlib.suppress(OSError):
                dest.unlink()
            raise

        logger.debug(
            "Downloaded %s (%d bytes) to %s", asset.name, written, dest
        )
        return dest

    async def download_text(self, asset: Asset) -> str:
        """Download a small text asset such as a checksum manifest."""

        async def read_text(response: aiohttp.ClientResponse) -> str:
            await self._raise_for_status(response)
            raw = await response.read()
            return raw.decode("utf-8", errors="replace")

        url, accept = self._download_target(asset)
        return await self._send(
            "GET", url, f"download {asset.name}", read_text, accept=accept
        )

    def _download_target(self, asset: Asset) -> tuple[str, str]:
        # The API URL also serves private repositories when authenticated
        if self.token and asset.url:
            return asset.url, BINARY_MEDIA_TYPE
        return asset.browser_download_url, BINARY_MEDIA_TYPE
