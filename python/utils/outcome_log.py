"""
Append-only outcome lists for image migration.

Every processed artifact produces exactly one line in one of three flat files
(failed, pushed, existed) under a caller-supplied path prefix::

    [PUSHED] 111122223333.dkr.ecr.us-east-1.amazonaws.com/docker-dev/foo/bar:1.0

The files are never read back, rotated or truncated here.
"""

import os
from enum import Enum
from threading import Lock
from typing import Dict

from utils.logging_utils import get_logger

logger = get_logger(__name__)

FAILED_LIST = "failed"
PUSHED_LIST = "pushed"
EXISTED_LIST = "existed"


class Outcome(Enum):
    """Terminal outcome of one artifact, tagged with the list it is written to."""

    FAILED_TRIM = ("FAILED_TRIM", FAILED_LIST)
    SKIP_SCOPE = ("SKIP-SCOPE", EXISTED_LIST)
    FAILED_PULL = ("FAILED_PULL", FAILED_LIST)
    SKIP_EXISTED = ("SKIP-EXISTED", EXISTED_LIST)
    FAILED_REPO_QUERY = ("FAILED_REPO_QUERY", FAILED_LIST)
    FAILED_REPO_CREATE = ("FAILED_REPO_CREATE", FAILED_LIST)
    FAILED_TAG = ("FAILED_TAG", FAILED_LIST)
    FAILED_PUSH = ("FAILED_PUSH", FAILED_LIST)
    FAILED_VERIFICATION = ("FAILED_VERIFICATION", FAILED_LIST)
    PUSHED = ("PUSHED", PUSHED_LIST)

    def __init__(self, tag: str, list_name: str):
        self.tag = tag
        self.list_name = list_name

    @property
    def is_failure(self) -> bool:
        return self.list_name == FAILED_LIST

    @property
    def exit_code(self) -> int:
        return 1 if self.is_failure else 0


class OutcomeLog:
    """Writes outcome lines to the failed/pushed/existed list files."""

    def __init__(self, list_base_path: str, file_prefix: str = "push-"):
        """
        Args:
            list_base_path: Path prefix the list files are written under (e.g. "/tmp/").
                It is concatenated as-is, so a directory needs a trailing separator.
            file_prefix: Prefix of each list file name
        """
        self.list_base_path = list_base_path or ""
        self.paths: Dict[str, str] = {
            name: f"{self.list_base_path}{file_prefix}{name}.list"
            for name in (FAILED_LIST, PUSHED_LIST, EXISTED_LIST)
        }
        self._lock = Lock()

    @property
    def failed_path(self) -> str:
        return self.paths[FAILED_LIST]

    @property
    def pushed_path(self) -> str:
        return self.paths[PUSHED_LIST]

    @property
    def existed_path(self) -> str:
        return self.paths[EXISTED_LIST]

    def record(self, outcome: Outcome, reference: str) -> None:
        """Append one "[TAG] reference" line to the list the outcome belongs to."""
        path = self.paths[outcome.list_name]
        line = f"[{outcome.tag}] {reference}\n"

        directory = os.path.dirname(path)
        # Single write per line
        with self._lock:
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(path, "a") as f:
                f.write(line)
        logger.debug(f"Recorded {outcome.tag} for {reference} in {path}")
