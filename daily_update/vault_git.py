"""Optional git history for vault writes, via dulwich."""

from __future__ import annotations

from pathlib import Path

from dulwich import porcelain
from dulwich.repo import Repo

from daily_update.errors import GIT_ERROR, UpdateError

COMMIT_IDENTITY = b"daily-update <daily-update@localhost>"


def _ensure_git_repo(vault_root: Path) -> Repo:
    git_dir = vault_root / ".git"
    try:
        if git_dir.exists():
            return Repo(str(vault_root))
        return porcelain.init(str(vault_root))
    except Exception as exc:
        raise UpdateError(
            GIT_ERROR,
            "Git repository could not be initialized.",
            {"path": str(vault_root)},
        ) from exc


class VaultHistory:
    """Commits the files written by one update pass."""

    def __init__(self, vault_root: Path) -> None:
        self.vault_root = Path(vault_root)

    def commit(self, paths: list[Path], operation: str) -> str:
        repo = _ensure_git_repo(self.vault_root)
        message = f"{operation}: {len(paths)} file(s)"
        try:
            porcelain.add(repo, [str(path) for path in paths])
            commit_sha = porcelain.commit(
                repo,
                message=message.encode("utf-8"),
                author=COMMIT_IDENTITY,
                committer=COMMIT_IDENTITY,
            )
        except Exception as exc:
            raise UpdateError(
                GIT_ERROR,
                "Git commit failed.",
                {"operation": operation, "files": len(paths)},
            ) from exc
        finally:
            repo.close()
        if isinstance(commit_sha, bytes):
            return commit_sha.decode("ascii")
        return str(commit_sha)
