"""Logic for linking documentation back to source lines on GitHub."""

import logging
import re
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

GITHUB_REMOTE_RE = re.compile(
    r"(?:https://github\.com/|git@github\.com:)([^/]+)/([^/]+?)(?:\.git)?$"
)


def detect_github_repo(root: Path) -> str | None:
    """Read ``org/repo`` from the ``origin`` remote, if it points at GitHub."""
    try:
        result = subprocess.run(
            ["git", "remote", "get-url", "origin"],
            cwd=root,
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        logger.debug("No git remote detected in %s: %s", root, exc)
        return None
    m = GITHUB_REMOTE_RE.search(result.stdout.strip())
    return f"{m.group(1)}/{m.group(2)}" if m else None


class GithubLinker:
    """Build blob URLs with ``#Lx-Ly`` anchors."""

    def __init__(self, repo: str | None = None, branch: str = "main", root: Path | None = None) -> None:
        self.branch = branch
        if repo is None and root is not None:
            repo = detect_github_repo(root)
        self.base_url = f"https://github.com/{repo}" if repo else None

    def url(self, path: str, line: int | None, end_line: int | None = None) -> str | None:
        if not self.base_url or not line:
            return None
        anchor = f"L{line}"
        if end_line and end_line != line:
            anchor += f"-L{end_line}"
        return f"{self.base_url}/blob/{self.branch}/{path}#{anchor}"
