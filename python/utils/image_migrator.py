"""
Per-image migration from the source artifact registry into ECR.

For one artifact reference the migrator trims the source prefix, checks the
artifact belongs to the requested scope, pulls it, skips it when ECR already
holds the target reference (unless it is a floating tag), and otherwise makes
sure the repository exists, tags, pushes and verifies. Every artifact ends in
exactly one outcome line; the first failing step is final.
"""

from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Iterable, Optional

from utils.docker_client import DockerClient
from utils.image_reference import (
    DEFAULT_SCOPES,
    build_target_reference,
    matches_scope,
    repository_name,
    trim_artifact_name,
)
from utils.logging_utils import get_logger
from utils.outcome_log import Outcome, OutcomeLog
from utils.repository_ensurer import RepositoryEnsurer, RepositoryStatus

logger = get_logger(__name__)


class FloatingTagPolicy:
    """Decides which trimmed image names are refreshed even when already in ECR.

    Patterns use shell-style wildcards, e.g. "docker:dind" or "*:latest".
    """

    def __init__(self, patterns: Iterable[str] = ("docker:dind",)):
        self.patterns = list(patterns)

    def __call__(self, trimmed_name: str) -> bool:
        return any(fnmatchcase(trimmed_name, pattern) for pattern in self.patterns)


@dataclass
class MigrationResult:
    """Outcome of migrating one artifact"""

    artifact: str
    outcome: Outcome
    target_reference: Optional[str] = None

    @property
    def exit_code(self) -> int:
        return self.outcome.exit_code

    @property
    def succeeded(self) -> bool:
        return not self.outcome.is_failure


class ImageMigrator:
    """Migrates single artifacts into ECR"""

    def __init__(
        self,
        docker_client: DockerClient,
        repository_ensurer: RepositoryEnsurer,
        outcome_log: OutcomeLog,
        floating_tag_policy: Optional[FloatingTagPolicy] = None,
        scopes: Iterable[str] = DEFAULT_SCOPES,
    ):
        self.docker_client = docker_client
        self.repository_ensurer = repository_ensurer
        self.outcome_log = outcome_log
        self.is_floating_tag = floating_tag_policy or FloatingTagPolicy()
        self.scopes = tuple(scopes)

    def _finish(self, artifact: str, outcome: Outcome, reference: str, target: Optional[str] = None):
        self.outcome_log.record(outcome, reference)
        return MigrationResult(artifact=artifact, outcome=outcome, target_reference=target)

    def migrate(
        self,
        artifact: str,
        account_id: str,
        base_repo: str,
        region: str,
        disable_pull: bool = False,
    ) -> MigrationResult:
        """Migrate one artifact into ECR.

        Args:
            artifact: Source reference (e.g. "artifactory.example.com/docker-dev/foo/bar:1.0")
            account_id: Target AWS account id
            base_repo: Target base repository, "docker-dev" or "docker-release"
            region: Target AWS region
            disable_pull: Skip the pull and use the image already present locally

        Returns:
            MigrationResult; exit_code is 0 for pushed/skipped artifacts and 1 for failures
        """
        logger.info("-" * 68)
        logger.info(f"Preparing to process image from [{artifact}]...")

        trimmed_name = trim_artifact_name(artifact)
        if not trimmed_name:
            logger.error(f"Could not trim artifact name from [{artifact}]. Skipping.")
            return self._finish(artifact, Outcome.FAILED_TRIM, artifact)
        logger.debug(f"Trimmed artifact name: {trimmed_name}")

        if not matches_scope(artifact, base_repo, self.scopes):
            logger.info(f"Skipping [{artifact}] as it does not match the target repo scope [{base_repo}].")
            return self._finish(artifact, Outcome.SKIP_SCOPE, artifact)
        logger.info(f"Image [{artifact}] matches target '{base_repo}' scope.")

        if disable_pull:
            logger.info(f"Docker pull explicitly disabled for [{artifact}].")
        elif not self.docker_client.pull(artifact):
            logger.warning(f"Failed to pull image [{artifact}]...")
            return self._finish(artifact, Outcome.FAILED_PULL, artifact)

        target = build_target_reference(account_id, region, base_repo, trimmed_name)

        logger.info(f"Checking if image already exists in ECR: {target}...")
        if self.docker_client.manifest_exists(target):
            if not self.is_floating_tag(trimmed_name):
                logger.warning(f"Duplicate found. Image already exists in repo [{target}]. Skipping push.")
                return self._finish(artifact, Outcome.SKIP_EXISTED, target, target)
            logger.warning(f"Floating tag [{trimmed_name}] already exists in repo. Refreshing with latest version...")
        else:
            logger.info("No duplicate docker image found. Proceeding with push.")

        return self._push(artifact, target, repository_name(base_repo, trimmed_name), region)

    def _push(self, artifact: str, target: str, repo_name: str, region: str) -> MigrationResult:
        status = self.repository_ensurer.ensure(repo_name, region)
        if not status.succeeded:
            logger.error(f"Failed to ensure ECR repository '{repo_name}' exists. Skipping push for this image.")
            outcome = Outcome.FAILED_REPO_QUERY if status == RepositoryStatus.QUERY_FAILED else Outcome.FAILED_REPO_CREATE
            return self._finish(artifact, outcome, artifact, target)

        if not self.docker_client.tag(artifact, target):
            logger.error(f"Failed to tag image [{artifact}] to [{target}].")
            return self._finish(artifact, Outcome.FAILED_TAG, artifact, target)

        if not self.docker_client.push(target):
            logger.warning(f"Failed to push image [{target}]...")
            return self._finish(artifact, Outcome.FAILED_PUSH, artifact, target)
        logger.info(f"Successfully pushed [{target}]")

        # Local check against the runtime image store, not a registry query
        logger.info(f"Inspecting local docker image for verification: {target}...")
        if not self.docker_client.image_exists(target):
            logger.error(f"Verification failed: {target}. Image not found after push.")
            return self._finish(artifact, Outcome.FAILED_VERIFICATION, artifact, target)
        logger.info(f"Verification successful for [{target}].")

        return self._finish(artifact, Outcome.PUSHED, target, target)
