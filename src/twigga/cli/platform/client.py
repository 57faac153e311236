"""HTTP client for the Twigga service API."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Sequence
from contextlib import ExitStack
from pathlib import Path
from typing import Any, Literal, TypeVar, cast

import requests
from pydantic import BaseModel, ValidationError
from urllib3 import encode_multipart_formdata

from .config import (
    APP_TOKEN,
    BUCKETS_COLLECTION,
    DATABASE,
    DEFAULT_ACCOUNT_URL,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    PROJECTS_COLLECTION,
    USER_AGENT,
)
from .exceptions import MalformedResponseError, PlatformAPIError, RateLimitError
from .release import relative_name
from .types import BucketRecord, Profile, ProjectRecord, UserRecord

logger = logging.getLogger(__name__)

AUTH_URL_KEYS = ("url", "auth_url", "authUrl", "authorization_url")

BucketPolicy = Literal["public", "private"]


def extract_auth_url(payload: dict[str, Any]) -> str:
    """Pick the authorization URL out of an authenticate response.

    The known keys are tried in order; only when none of them holds a
    non-empty string is any ``http``-prefixed string value accepted.

    Raises:
        MalformedResponseError: If no URL can be found.
    """
    for key in AUTH_URL_KEYS:
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
    for value in payload.values():
        if isinstance(value, str) and value.startswith("http"):
            return value
    raise MalformedResponseError(
        0, f"no auth url found in response: {json.dumps(payload)}"
    )


class PlatformClient:
    """HTTP client for the Twigga service API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        account_base_url: str = DEFAULT_ACCOUNT_URL,
        token: str = "",
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Origin of the document, storage and hosting API.
            account_base_url: Origin of the account and auth API.
            token: Value sent in the BONGO-TOKEN header (may be empty).
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.account_base_url = account_base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._session = requests.Session()

    @classmethod
    def from_profile(cls, profile: Profile) -> PlatformClient:
        """Build a client for the given profile.

        Logged-in profiles use the session token; otherwise the application
        token is sent so anonymous calls such as auth initiation work.
        """
        token = profile.token if profile.is_logged_in else APP_TOKEN
        return cls(
            base_url=profile.base_url or DEFAULT_BASE_URL,
            account_base_url=profile.account_base_url or DEFAULT_ACCOUNT_URL,
            token=token,
        )

    def _get_headers(self, json_body: bool = True) -> dict[str, str]:
        headers = {"User-Agent": USER_AGENT}
        if json_body:
            headers["Content-Type"] = "application/json"
        if self.token:
            headers["BONGO-TOKEN"] = self.token
        return headers

    def _request(
        self,
        method: str,
        url: str,
        json_data: Any = None,
        files: list | None = None,
        multipart: bool = False,
    ) -> requests.Response:
        """Make a request and raise on transport errors or status >= 400.

        Args:
            method: HTTP method.
            url: Absolute URL.
            json_data: JSON body.
            files: Multipart file tuples for ``requests``.
            multipart: Send ``files`` as a multipart form, even when empty.

        Returns:
            Response object.

        Raises:
            PlatformAPIError: With the response body verbatim for HTTP errors.
        """
        headers = self._get_headers(json_body=not multipart)
        data = None
        if multipart and not files:
            # requests drops an empty files list, so encode the empty form here
            data, headers["Content-Type"] = encode_multipart_formdata([])
            files = None
        logger.debug("%s %s", method, url)
        try:
            response = self._session.request(
                method,
                url,
                headers=headers,
                json=json_data,
                data=data,
                files=files,
                timeout=self.timeout,
            )
        except requests.exceptions.ConnectionError as e:
            raise PlatformAPIError(0, "Cannot connect to Twigga API") from e
        except requests.exceptions.Timeout as e:
            raise PlatformAPIError(0, "Request timed out") from e
        except requests.exceptions.RequestException as e:
            raise PlatformAPIError(0, "Network request failed") from e

        if response.status_code >= 400:
            logger.debug("%s %s -> %s", method, url, response.status_code)
            raise PlatformAPIError(
                response.status_code, response.text or response.reason or ""
            )
        return response

    @staticmethod
    def _safe_json(resp: requests.Response) -> Any:
        """Parse JSON from response, raising MalformedResponseError on failure."""
        try:
            return resp.json()
        except ValueError as e:
            raise MalformedResponseError(
                resp.status_code, f"Unexpected response from server: {resp.text}"
            ) from e

    _T = TypeVar("_T", bound=BaseModel)

    @staticmethod
    def _safe_validate(model_cls: type[_T], data: Any) -> _T:
        """Validate data against a model, raising MalformedResponseError on failure."""
        try:
            return model_cls.model_validate(data)
        except ValidationError as e:
            raise MalformedResponseError(
                0, f"Unexpected response format from server: {e.error_count()} errors"
            ) from e

    def _url(self, *parts: str) -> str:
        return "/".join((self.base_url, *parts))

    # ==================== AUTH ====================

    def authenticate(self, redirect_to: str) -> str:
        """Start a browser login.

        Args:
            redirect_to: Loopback URL the service redirects to with the token.

        Returns:
            Authorization URL to open in the browser.
        """
        resp = self._request(
            "POST",
            f"{self.account_base_url}/application/authenticate",
            json_data={"redirectTo": redirect_to},
        )
        data = self._safe_json(resp)
        if not isinstance(data, dict):
            raise MalformedResponseError(0, f"no auth url found in response: {resp.text}")
        return extract_auth_url(data)

    def get_token_data(self, token: str) -> UserRecord:
        """Introspect a session token.

        Args:
            token: Session token to look up.

        Returns:
            The user the token belongs to.
        """
        resp = self._request("GET", f"{self.account_base_url}/user/token/{token}")
        return self._safe_validate(UserRecord, self._safe_json(resp))

    # ==================== DOCUMENTS ====================

    def query_documents(
        self, db: str, collection: str, filters: dict[str, Any]
    ) -> list[dict[str, Any]]:
        """Query a collection with an equality/membership filter.

        Args:
            db: Database name.
            collection: Collection name.
            filters: Filter document.

        Returns:
            Matching documents; empty if none matched or the body was not JSON.

        Raises:
            RateLimitError: On HTTP 429.
        """
        try:
            resp = self._request(
                "POST", self._url("document", db, collection, "filter"), json_data=filters
            )
        except PlatformAPIError as e:
            if e.status_code == 429:
                raise RateLimitError() from e
            raise

        try:
            data = resp.json()
        except ValueError:
            logger.debug("Query on %s/%s returned non-JSON body", db, collection)
            return []
        if not isinstance(data, dict):
            return []
        documents = data.get("documents") or []
        return [d for d in documents if isinstance(d, dict)]

    def create_document(self, db: str, collection: str, doc: dict[str, Any]) -> str:
        """Insert a document with a server-assigned ID.

        Returns:
            Raw response body.
        """
        resp = self._request("POST", self._url("document", db, collection), json_data=doc)
        return resp.text

    def create_document_with_id(
        self, db: str, collection: str, doc_id: str, doc: dict[str, Any]
    ) -> str:
        """Insert a document under an explicit ID.

        Returns:
            Raw response body.
        """
        resp = self._request(
            "POST", self._url("document", db, collection, doc_id), json_data=doc
        )
        return resp.text

    def list_projects(self, user_id: str) -> list[ProjectRecord]:
        """List projects the user is a member of."""
        docs = self.query_documents(
            DATABASE, PROJECTS_COLLECTION, {"members": [user_id]}
        )
        return [self._safe_validate(ProjectRecord, d) for d in docs]

    def list_buckets(
        self, project_id: str, folder: str | None = None
    ) -> list[BucketRecord]:
        """List bucket records of a project, optionally for a single folder."""
        filters: dict[str, Any] = {"projectId": project_id}
        if folder is not None:
            filters["folder"] = folder
        docs = self.query_documents(DATABASE, BUCKETS_COLLECTION, filters)
        return [self._safe_validate(BucketRecord, d) for d in docs]

    # ==================== STORAGE ====================

    def create_bucket(self, name: str) -> dict[str, Any]:
        """Create a storage bucket.

        Args:
            name: Bucket name.

        Returns:
            Bucket record as returned by the server.
        """
        resp = self._request("POST", self._url("storage", "buckets"), json_data={"name": name})
        try:
            data = resp.json()
        except ValueError:
            return {}
        return cast(dict[str, Any], data) if isinstance(data, dict) else {}

    def set_bucket_policy(self, bucket: str, policy: BucketPolicy) -> None:
        """Make a bucket public or private."""
        if policy not in ("public", "private"):
            raise ValueError(f"invalid bucket policy: {policy!r}")
        self._request(
            "POST",
            self._url("storage", "buckets", bucket, "policy"),
            json_data={"policy": policy},
        )

    def _post_files(
        self, url: str, files: Sequence[Path], base_dir: Path
    ) -> tuple[requests.Response, list[str]]:
        """POST files as multipart ``files`` parts named by their relative path.

        Raises:
            ValueError: If a relative path is not valid UTF-8.
        """
        names: list[str] = []
        with ExitStack() as stack:
            parts = []
            for path in files:
                name = relative_name(path, base_dir)
                try:
                    name.encode("utf-8")
                except UnicodeEncodeError:
                    raise ValueError(
                        f"file name is not valid UTF-8: {os.fsencode(name)!r}"
                    ) from None
                fh = stack.enter_context(open(path, "rb"))
                parts.append(("files", (name, fh, "application/octet-stream")))
                names.append(name)
            resp = self._request("POST", url, files=parts, multipart=True)
        return resp, names

    def upload_files(
        self, bucket: str, files: Sequence[Path], base_dir: Path
    ) -> list[str]:
        """Upload files to a bucket, keeping paths relative to ``base_dir``.

        Args:
            bucket: Target bucket.
            files: Files to upload.
            base_dir: Directory object names are computed from.

        Returns:
            Object names as reported by the server.
        """
        resp, _ = self._post_files(
            self._url("storage", "buckets", bucket, "objects"), files, base_dir
        )
        data = self._safe_json(resp)
        if not isinstance(data, dict):
            raise MalformedResponseError(0, f"unexpected upload response: {resp.text}")
        return [str(f) for f in data.get("files") or []]

    def list_files(self, bucket: str) -> list[dict[str, Any]]:
        """List objects stored in a bucket."""
        resp = self._request("GET", self._url("storage", "buckets", bucket, "objects"))
        data = self._safe_json(resp)
        files = data.get("files") if isinstance(data, dict) else None
        if not isinstance(files, list):
            raise MalformedResponseError(0, f"unexpected files response: {resp.text}")
        return [f for f in files if isinstance(f, dict)]

    def get_file_url(self, bucket: str, object_name: str) -> str:
        """Get a download URL for an object."""
        resp = self._request(
            "GET", self._url("storage", "buckets", bucket, "objects", object_name)
        )
        data = self._safe_json(resp)
        url = data.get("url") if isinstance(data, dict) else None
        if not isinstance(url, str):
            raise MalformedResponseError(0, f"unexpected file response: {resp.text}")
        return url

    def delete_file(self, bucket: str, object_name: str) -> None:
        """Delete an object from a bucket."""
        self._request(
            "DELETE", self._url("storage", "buckets", bucket, "objects", object_name)
        )

    # ==================== HOSTING ====================

    def upload_site_version(
        self,
        bucket: str,
        site_id: str,
        version: str,
        files: Sequence[Path],
        base_dir: Path,
    ) -> list[str]:
        """Upload every file of a release in one multipart request.

        Args:
            bucket: Hosting bucket.
            site_id: Site the release belongs to.
            version: Release version label.
            files: Files in release order.
            base_dir: Site root the part names are relative to.

        Returns:
            Relative paths that were sent.
        """
        _, names = self._post_files(
            self._url("hosting", bucket, site_id, version, "upload"), files, base_dir
        )
        return names

    def point_channel(
        self, bucket: str, site_id: str, channel: str, version: str
    ) -> None:
        """Point a site channel at a release version."""
        self._request(
            "POST",
            self._url("hosting", bucket, site_id, "channels", channel),
            json_data={"version": version},
        )
