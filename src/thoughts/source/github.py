"""Live GitHub content source.

Fingerprints a repository through the activity API (the ``after`` commit of
the most recent push) and pulls the whole tree as a zipball. The zipball
endpoint answers with a redirect to the archive host, which is followed.
"""

from __future__ import annotations

import io
import sys
import zipfile
from urllib.parse import urlparse

import httpx

from thoughts._errors import ArchiveError, ConfigError, SourceError
from thoughts.source.base import Contents

GITHUB_API = "https://api.github.com"
_ACCEPT = "application/vnd.github.v3+json"


def parse_repo_url(repo_url: str) -> tuple[str, str]:
    """Split ``https://github.com/{owner}/{name}`` into ``(owner, name)``.

    Raises:
        ConfigError: If the URL path is anything other than ``/{owner}/{name}``.

    """
    parts = urlparse(repo_url).path.split("/")
    if len(parts) != 3 or not parts[1] or not parts[2]:
        msg = "invalid repo url, should be just github.com/{owner}/{name}"
        raise ConfigError(msg)
    return parts[1], parts[2]


class GitHubSource:
    """Fetches fingerprints and zipballs from the GitHub REST API.

    A new ``httpx.AsyncClient`` is opened per call so the source is not
    bound to any one event loop (startup sync and the server loop differ).

    Args:
        repo_url: Repository URL, ``https://github.com/{owner}/{name}``.
        api_url: Base URL of the API (overridable for tests / GHE).
        branch: Branch whose zipball is pulled.
        timeout: Per-request timeout in seconds.
        user_agent: Client marker sent with every request.
        transport: Optional httpx transport (tests use ``MockTransport``).

    """

    def __init__(
        self,
        repo_url: str,
        *,
        api_url: str = GITHUB_API,
        branch: str = "main",
        timeout: float = 5.0,
        user_agent: str = "thoughts-agent",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._owner, self._name = parse_repo_url(repo_url)
        self._api_url = api_url.rstrip("/")
        self._branch = branch
        self._timeout = timeout
        self._user_agent = user_agent
        self._transport = transport
        print(f"  nwo: {self._owner}/{self._name}", file=sys.stderr)

    @property
    def nwo(self) -> str:
        """``owner/name`` of the mirrored repository."""
        return f"{self._owner}/{self._name}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers={"Accept": _ACCEPT, "User-Agent": self._user_agent},
            timeout=self._timeout,
            follow_redirects=True,
            transport=self._transport,
        )

    def _repo_url(self, suffix: str) -> str:
        return f"{self._api_url}/repos/{self._owner}/{self._name}/{suffix}"

    async def last_hash(self) -> str:
        """Return the ``after`` SHA of the repository's latest activity.

        Raises:
            SourceError: On network failure, a non-200 answer, an
                undecodable body, or a repository with no activity yet.

        """
        url = self._repo_url("activity")
        print(f"  getting last hash {url}", file=sys.stderr)
        try:
            async with self._client() as client:
                resp = await client.get(url)
        except httpx.HTTPError as exc:
            msg = f"failed to get last hash: {exc}"
            raise SourceError(msg) from exc

        if resp.status_code != 200:
            msg = f"failed to get last hash: unexpected status code: {resp.status_code}"
            raise SourceError(msg)

        try:
            activity = resp.json()
        except ValueError as exc:
            msg = f"failed to decode activity response: {exc}"
            raise SourceError(msg) from exc

        if not isinstance(activity, list) or not activity:
            msg = "no activity found, must commit to the repo before using the agent"
            raise SourceError(msg)

        after = activity[0].get("after") if isinstance(activity[0], dict) else None
        if not after:
            msg = "latest activity entry has no 'after' commit"
            raise SourceError(msg)

        print(f"  last hash is {after}", file=sys.stderr)
        return str(after)

    async def contents(self) -> Contents:
        """Download the branch zipball and expose it as a read-only tree.

        Raises:
            SourceError: On network failure or a non-200 final answer.
            ArchiveError: If the body is not a zip archive.

        """
        url = self._repo_url(f"zipball/{self._branch}")
        print(f"  getting zipball {url}", file=sys.stderr)
        try:
            async with self._client() as client:
                resp = await client.get(url)
        except httpx.HTTPError as exc:
            msg = f"failed to get contents: {exc}"
            raise SourceError(msg) from exc

        if resp.status_code != 200:
            msg = f"failed to get contents: unexpected status code: {resp.status_code}"
            raise SourceError(msg)

        body = resp.content
        print(f"  zipball is {len(body)} bytes", file=sys.stderr)
        try:
            archive = zipfile.ZipFile(io.BytesIO(body))
        except zipfile.BadZipFile as exc:
            msg = f"failed to create zip reader: {exc}"
            raise ArchiveError(msg) from exc

        return Contents(tree=zipfile.Path(archive), release=archive.close)
