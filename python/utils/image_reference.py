"""
Helpers for deriving ECR coordinates from source artifact references.

A source artifact looks like ``artifactory.example.com/docker-dev/foo/bar:1.0``.
The part after the scope segment (``foo/bar:1.0``) is the trimmed name, which
is re-rooted under ``{account}.dkr.ecr.{region}.amazonaws.com/{base_repo}/``.
"""

import re
from typing import Iterable

DEFAULT_SCOPES = ("docker-dev", "docker-release")

_SCOPE_SEGMENT = re.compile(r"(?:^|/)docker-(?:release|dev)/")


def trim_artifact_name(artifact: str) -> str:
    """Strip the source registry and scope prefix from an artifact reference.

    Returns an empty string when the reference has no docker-dev/ or
    docker-release/ path segment.
    """
    if not artifact:
        return ""
    match = _SCOPE_SEGMENT.search(artifact)
    if not match:
        return ""
    return artifact[match.end():]


def matches_scope(artifact: str, base_repo: str, scopes: Iterable[str] = DEFAULT_SCOPES) -> bool:
    """True when the artifact lives under the scope matching the target base repository."""
    return base_repo in tuple(scopes) and f"/{base_repo}/" in artifact


def registry_host(account_id: str, region: str) -> str:
    return f"{account_id}.dkr.ecr.{region}.amazonaws.com"


def build_target_reference(account_id: str, region: str, base_repo: str, trimmed_name: str) -> str:
    """Build the full ECR image reference for a trimmed artifact name."""
    return f"{registry_host(account_id, region)}/{base_repo}/{trimmed_name}"


def repository_name(base_repo: str, trimmed_name: str) -> str:
    """ECR repository name for a trimmed artifact, without tag or digest.

    >>> repository_name("docker-dev", "foo/bar:1.0")
    'docker-dev/foo/bar'
    """
    path = f"{base_repo}/{trimmed_name}".split("@", 1)[0]
    last_segment = path.rsplit("/", 1)[-1]
    if ":" in last_segment:
        path = path.rsplit(":", 1)[0]
    return path
