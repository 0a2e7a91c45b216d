"""Build metadata reported by the health endpoint.

DAYDLE_VERSION and GIT_COMMIT are injected at deploy time. Outside a
deployment the commit is read from the local git checkout when available.
"""

import os
import subprocess
from functools import cache


def _git_short_sha() -> str | None:
    try:
        return subprocess.check_output(
            ["git", "rev-parse", "--short", "HEAD"],  # noqa: S607
            text=True,
            stderr=subprocess.DEVNULL,
        ).strip()
    except (FileNotFoundError, subprocess.CalledProcessError):
        return None


APP_VERSION: str = os.environ.get("DAYDLE_VERSION", "dev")


@cache
def git_commit() -> str:
    """Commit the running code was built from, "unknown" when it cannot be determined."""
    return os.environ.get("GIT_COMMIT") or _git_short_sha() or "unknown"
