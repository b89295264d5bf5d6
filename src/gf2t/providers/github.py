"""Branch facts from the GitHub REST API, without cloning."""

from __future__ import annotations

import logging
import re
from typing import Any
from urllib.parse import quote

import httpx

from ..core.errors import FactProviderError
from ..core.models import BranchFact

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

GITHUB_API = "https://api.github.com"
_API_VERSION = "2022-11-28"
_PAGE_SIZE = 100
_GITHUB_URL_RE = re.compile(
    r"(?:https?://)?github\.com/(?P<owner>[^/]+)/(?P<repo>[^/\s#?]+)"
)


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------

def parse_github_url(url: str) -> tuple[str, str]:
    """Extract (owner, repo) from a GitHub URL.

    Raises ValueError if the URL doesn't match the expected pattern.
    """
    m = _GITHUB_URL_RE.search(url)
    if not m:
        raise ValueError(f"Not a valid GitHub URL: {url}")
    repo = m.group("repo").rstrip("/")
    if repo.endswith(".git"):
        repo = repo[:-4]
    return m.group("owner"), repo


def is_github_url(source: str) -> bool:
    """Return True if *source* looks like a GitHub repository URL."""
    return bool(_GITHUB_URL_RE.search(source))


# ---------------------------------------------------------------------------
# Provider
# ---------------------------------------------------------------------------

class GitHubProvider:
    """Collects branch facts for ``owner/repo`` through the GitHub API.

    Uses the branch listing, commit and compare endpoints. A dry-run merge
    needs a clone, so this provider offers no merge probe.
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        *,
        token: str | None = None,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.token = token
        self.timeout = timeout
        self._client = client

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> GitHubProvider:
        owner, repo = parse_github_url(url)
        return cls(owner, repo, **kwargs)

    @property
    def source(self) -> str:
        return f"https://github.com/{self.owner}/{self.repo}"

    def merge_probe(self) -> None:
        return None

    # -- public API ----------------------------------------------------------

    def list_branches(self) -> list[BranchFact]:
        """Return one :class:`BranchFact` per remote branch.

        Raises FactProviderError when the branch list cannot be fetched or
        is empty. Branches whose commit cannot be read are skipped.
        """
        if self._client is not None:
            return self._collect(self._client)
        with httpx.Client(
            base_url=GITHUB_API,
            headers=self._headers(),
            timeout=self.timeout,
            follow_redirects=True,
        ) as client:
            return self._collect(client)

    # -- private -------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": _API_VERSION,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _get(self, client: httpx.Client, path: str, **params: Any) -> Any:
        resp = client.get(f"/repos/{self.owner}/{self.repo}{path}", params=params or None)
        resp.raise_for_status()
        return resp.json()

    def _collect(self, client: httpx.Client) -> list[BranchFact]:
        listed = self._list_remote_branches(client)
        names = [b["name"] for b in listed]
        if "main" in names:
            trunk = "main"
        elif "master" in names:
            trunk = "master"
        else:
            trunk = names[0]

        facts: list[BranchFact] = []
        for entry in listed:
            fact = self._read_branch(client, entry, trunk)
            if fact is not None:
                facts.append(fact)

        logger.info("Collected %d branch(es) from %s (trunk=%s)", len(facts), self.source, trunk)
        return facts

    def _list_remote_branches(self, client: httpx.Client) -> list[dict[str, Any]]:
        branches: list[dict[str, Any]] = []
        page = 1
        while True:
            try:
                batch = self._get(client, "/branches", per_page=_PAGE_SIZE, page=page)
            except httpx.HTTPStatusError as exc:
                raise FactProviderError(
                    f"GitHub API error: {exc.response.status_code} "
                    f"{exc.response.reason_phrase} for {self.owner}/{self.repo} branches"
                ) from exc
            except (httpx.HTTPError, ValueError) as exc:
                raise FactProviderError(f"Could not read branches from GitHub: {exc}") from exc

            if not batch:
                break
            branches.extend(batch)
            if len(batch) < _PAGE_SIZE:
                break
            page += 1

        if not branches:
            raise FactProviderError(f"No branches found for {self.owner}/{self.repo}")
        logger.debug("Listed %d branch(es) over %d page(s)", len(branches), page)
        return branches

    def _read_branch(
        self,
        client: httpx.Client,
        entry: dict[str, Any],
        trunk: str,
    ) -> BranchFact | None:
        name = entry["name"]
        try:
            commit = self._get(client, f"/commits/{entry['commit']['sha']}")
            meta = commit["commit"]
            date = meta["author"]["date"]
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as exc:
            logger.warning('Skipping branch "%s": %s', name, exc)
            return None
        if not date:
            logger.warning('Skipping branch "%s": incomplete commit data', name)
            return None

        ahead = behind = 0
        is_merged = False
        if name != trunk:
            try:
                # "#" and "%" are legal in branch names
                path = f"/compare/{quote(trunk, safe='/')}...{quote(name, safe='/')}"
                compare = self._get(client, path)
                ahead = int(compare["ahead_by"])
                behind = int(compare["behind_by"])
                # Nothing ahead of the trunk means the work has landed
                is_merged = ahead == 0
            except (httpx.HTTPError, KeyError, TypeError, ValueError) as exc:
                logger.debug('Compare unavailable for "%s": %s', name, exc)

        return BranchFact(
            name=name,
            last_commit_date=date,
            last_commit_hash=commit.get("sha", entry["commit"]["sha"]),
            last_commit_message=meta.get("message", ""),
            author=meta["author"].get("name", ""),
            ahead_of_main=ahead,
            behind_main=behind,
            is_merged=is_merged,
        )
