"""Branch facts from a local working copy, via git plumbing commands."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from ..core.errors import FactProviderError, NotARepositoryError
from ..core.models import BranchFact, ProbeOutcome

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%H%x00%aI%x00%an%x00%s"
_HEADS = "refs/heads/"
_REMOTES = "refs/remotes/"
_DEFAULT_REMOTE = "origin"


def branch_name_for_ref(ref: str) -> str:
    """Map a full ref name to the branch name used in the analysis.

    Local heads keep their name, ``origin`` remote-tracking refs lose the
    remote prefix and other remotes keep a ``remotes/<remote>/`` prefix.
    """
    if ref.startswith(_HEADS):
        return ref[len(_HEADS):]
    if ref.startswith(_REMOTES):
        short = ref[len(_REMOTES):]
        remote, _, branch = short.partition("/")
        if remote == _DEFAULT_REMOTE:
            return branch
        return f"remotes/{short}"
    return ref


def _run_git(
    repo_dir: Path,
    args: list[str],
    *,
    timeout: float,
    check: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Run ``git <args>`` in *repo_dir*.

    Raises CalledProcessError on a non-zero exit when *check* is set and
    FileNotFoundError when git is not installed.
    """
    return subprocess.run(
        ["git", *args],
        cwd=str(repo_dir),
        capture_output=True, text=True, timeout=timeout, check=check,
        encoding="utf-8", errors="replace",
    )


class GitMergeProbe:
    """Checks whether develop merges cleanly into the trunk using ``git merge-tree``.

    ``--write-tree`` computes the merge in the object database only, so the
    working copy and index are never touched. The exit status is the
    answer: 0 is clean, 1 is conflicted, anything else means the check
    cannot run here (git older than 2.38, unrelated histories). Both refs
    are resolved first, since git also exits 1 for a ref it cannot find.
    """

    def __init__(
        self,
        repo_dir: Path,
        refs: dict[str, str] | None = None,
        timeout: float = 60.0,
    ) -> None:
        self.repo_dir = repo_dir
        self.refs = refs or {}
        self.timeout = timeout

    def check(self, trunk: str, develop: str) -> ProbeOutcome:
        trunk_ref = self.refs.get(trunk, trunk)
        develop_ref = self.refs.get(develop, develop)
        cmd = [
            "merge-tree", "--write-tree", "--name-only", "--no-messages",
            trunk_ref, develop_ref,
        ]
        try:
            for ref in (trunk_ref, develop_ref):
                if not self._resolves(ref):
                    logger.debug("merge-tree skipped: %s is not a commit", ref)
                    return ProbeOutcome.UNSUPPORTED
            result = _run_git(self.repo_dir, cmd, timeout=self.timeout, check=False)
        except (OSError, subprocess.TimeoutExpired) as exc:
            logger.debug("merge-tree could not run: %s", exc)
            return ProbeOutcome.UNSUPPORTED

        if result.returncode == 0:
            return ProbeOutcome.CLEAN
        if result.returncode == 1:
            logger.info("Merge conflicts between %s and %s", trunk, develop)
            return ProbeOutcome.CONFLICT
        logger.debug("merge-tree exited %d: %s", result.returncode, result.stderr.strip())
        return ProbeOutcome.UNSUPPORTED

    def _resolves(self, ref: str) -> bool:
        result = _run_git(
            self.repo_dir,
            ["rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"],
            timeout=self.timeout, check=False,
        )
        return result.returncode == 0


class LocalGitProvider:
    """Collects branch facts from a local repository.

    Usage::

        provider = LocalGitProvider("~/src/project")
        facts = provider.list_branches()
    """

    def __init__(
        self,
        repo_path: str | Path,
        *,
        fetch: bool = True,
        timeout: float = 60.0,
    ) -> None:
        self.repo_dir = Path(repo_path).expanduser().resolve()
        self.fetch = fetch
        self.timeout = timeout
        self._refs: dict[str, str] = {}

    @property
    def source(self) -> str:
        return str(self.repo_dir)

    # -- public API ----------------------------------------------------------

    def list_branches(self) -> list[BranchFact]:
        """Return one :class:`BranchFact` per branch name.

        Raises NotARepositoryError if the path is not a git repository and
        FactProviderError if the branch refs cannot be listed at all.
        Branches whose latest commit cannot be read are skipped.
        """
        self._ensure_repository()
        if self.fetch:
            self._fetch()

        self._refs = self._branch_refs()
        trunk_ref = self._refs.get("main") or self._refs.get("master") or "master"
        merged = self._merged_refs(trunk_ref)

        facts: list[BranchFact] = []
        for name, ref in self._refs.items():
            fact = self._read_branch(name, ref, trunk_ref, merged)
            if fact is not None:
                facts.append(fact)

        logger.info("Collected %d branch(es) from %s (trunk=%s)",
                    len(facts), self.repo_dir, trunk_ref)
        return facts

    def merge_probe(self) -> GitMergeProbe:
        return GitMergeProbe(self.repo_dir, dict(self._refs), timeout=self.timeout)

    # -- private -------------------------------------------------------------

    def _git(self, args: list[str], *, check: bool = True) -> str:
        return _run_git(self.repo_dir, args, timeout=self.timeout, check=check).stdout

    def _ensure_repository(self) -> None:
        if not self.repo_dir.is_dir():
            raise NotARepositoryError(str(self.repo_dir))
        try:
            inside = self._git(["rev-parse", "--is-inside-work-tree"]).strip()
        except FileNotFoundError as exc:
            raise FactProviderError("git executable not found on PATH") from exc
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired) as exc:
            raise NotARepositoryError(str(self.repo_dir)) from exc
        # Bare repositories answer "false"
        if inside != "true":
            raise NotARepositoryError(str(self.repo_dir))

    def _fetch(self) -> None:
        try:
            self._git(["fetch", "--all", "--prune"])
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired) as exc:
            stderr = getattr(exc, "stderr", "") or ""
            logger.warning("git fetch failed, analyzing local refs only: %s", stderr.strip() or exc)

    def _branch_refs(self) -> dict[str, str]:
        """Map branch name → full ref, local heads first."""
        try:
            raw = self._git([
                "for-each-ref", "--format=%(refname)", _HEADS.rstrip("/"), _REMOTES.rstrip("/"),
            ])
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired) as exc:
            raise FactProviderError(f"Could not list branches in {self.repo_dir}: {exc}") from exc

        refs: dict[str, str] = {}
        for line in raw.splitlines():
            ref = line.strip()
            if not ref:
                continue
            name = branch_name_for_ref(ref)
            if not name or name == "HEAD" or name.endswith("/HEAD"):
                continue
            if name in refs:
                logger.debug("Skipping %s: duplicates %s", ref, refs[name])
                continue
            refs[name] = ref
        return refs

    def _merged_refs(self, trunk_ref: str) -> set[str]:
        try:
            raw = self._git(["branch", "-a", "--merged", trunk_ref, "--format=%(refname)"])
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired) as exc:
            logger.warning("Could not determine merged branches for %s: %s", trunk_ref, exc)
            return set()
        return {line.strip() for line in raw.splitlines() if line.strip()}

    def _ahead_behind(self, trunk_ref: str, ref: str) -> tuple[int, int]:
        try:
            raw = self._git(["rev-list", "--left-right", "--count", f"{trunk_ref}...{ref}"])
            behind, ahead = (int(n) for n in raw.split())
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, ValueError) as exc:
            # No shared history with the trunk, or no trunk at all
            logger.debug("ahead/behind unavailable for %s: %s", ref, exc)
            return 0, 0
        return ahead, behind

    def _read_branch(
        self,
        name: str,
        ref: str,
        trunk_ref: str,
        merged: set[str],
    ) -> BranchFact | None:
        try:
            raw = self._git(["log", "-1", f"--format={_LOG_FORMAT}", ref, "--"])
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired) as exc:
            logger.warning("Skipping branch %s: cannot read latest commit (%s)", name, exc)
            return None

        parts = raw.rstrip("\n").split("\x00")
        if len(parts) < 4:
            logger.warning("Skipping branch %s: no commits", name)
            return None
        sha, date, author, subject = parts[:4]

        ahead, behind = self._ahead_behind(trunk_ref, ref)
        return BranchFact(
            name=name,
            last_commit_date=date,
            last_commit_hash=sha,
            last_commit_message=subject,
            author=author,
            ahead_of_main=ahead,
            behind_main=behind,
            is_merged=ref in merged,
        )
