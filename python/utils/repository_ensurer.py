"""
Create ECR repositories on demand.

The ensurer describes the repository first and only creates it when ECR
answers RepositoryNotFoundException. Any other describe failure is reported
without creating anything.
"""

from enum import Enum
from typing import Callable, Dict

from botocore.exceptions import BotoCoreError, ClientError

from utils.ecr_client import EcrClient, RepositoryNotFoundError, RepositoryQueryError
from utils.error_utils import create_ecr_api_error
from utils.logging_utils import get_logger

logger = get_logger(__name__)


class RepositoryStatus(Enum):
    EXISTS = "exists"
    CREATED = "created"
    QUERY_FAILED = "query_failed"
    CREATE_FAILED = "create_failed"

    @property
    def succeeded(self) -> bool:
        return self in (RepositoryStatus.EXISTS, RepositoryStatus.CREATED)


class RepositoryEnsurer:
    """Makes sure an ECR repository exists before an image is pushed to it."""

    def __init__(
        self,
        client_factory: Callable[[str], EcrClient] = EcrClient,
        scan_on_push: bool = True,
        tag_mutability: str = "IMMUTABLE",
    ):
        """
        Args:
            client_factory: Builds an EcrClient for a region
            scan_on_push: Scan-on-push setting for created repositories
            tag_mutability: Tag mutability for created repositories
        """
        self.client_factory = client_factory
        self.scan_on_push = scan_on_push
        self.tag_mutability = tag_mutability
        self._clients: Dict[str, EcrClient] = {}

    @classmethod
    def from_config(cls, config_manager) -> "RepositoryEnsurer":
        return cls(
            scan_on_push=config_manager.get_scan_on_push(),
            tag_mutability=config_manager.get_tag_mutability(),
        )

    def _get_client(self, region: str) -> EcrClient:
        if region not in self._clients:
            self._clients[region] = self.client_factory(region)
        return self._clients[region]

    def ensure(self, repository_name: str, region: str) -> RepositoryStatus:
        """Create the repository if it does not already exist.

        Args:
            repository_name: Full repository name without tag (e.g. "docker-dev/my-app")
            region: AWS region of the registry

        Returns:
            RepositoryStatus; use .succeeded for a plain success/failure answer

        Raises:
            ValueError: If the repository name or region is empty
        """
        if not repository_name or not region:
            raise ValueError("Both repository name and region are required to ensure an ECR repository")

        logger.info(f"Checking if ECR repository '{repository_name}' exists in '{region}'...")
        client = self._get_client(region)

        try:
            client.describe_repository(repository_name)
            logger.info(f"ECR repository '{repository_name}' already exists. Skipping creation.")
            return RepositoryStatus.EXISTS
        except RepositoryNotFoundError:
            logger.info(f"ECR repository '{repository_name}' not found. Creating...")
        except RepositoryQueryError as e:
            logger.error(f"Failed to describe ECR repository '{repository_name}' in '{region}'.")
            logger.error(create_ecr_api_error("DescribeRepositories", repository_name, region, e).format_message())
            return RepositoryStatus.QUERY_FAILED

        try:
            repository = client.create_repository(
                repository_name,
                scan_on_push=self.scan_on_push,
                tag_mutability=self.tag_mutability,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to create ECR repository '{repository_name}' in '{region}'.")
            logger.error(create_ecr_api_error("CreateRepository", repository_name, region, e).format_message())
            return RepositoryStatus.CREATE_FAILED

        logger.info(f"ECR repository '{repository_name}' created successfully: {repository.get('repositoryUri', '')}")
        return RepositoryStatus.CREATED
