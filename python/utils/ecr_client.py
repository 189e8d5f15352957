"""
ECR API client.

Thin wrapper over the boto3 ECR client that separates a missing repository
from every other describe failure, which is the distinction the repository
ensurer acts on.
"""

from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from utils.logging_utils import get_logger

logger = get_logger(__name__)


class RepositoryNotFoundError(Exception):
    """Raised when ECR reports RepositoryNotFoundException for a describe call."""


class RepositoryQueryError(Exception):
    """Raised when describing a repository fails for any reason other than not found."""


def get_ecr_client(region_name: str):
    return boto3.client("ecr", region_name=region_name)


def _error_code(error: Exception) -> Optional[str]:
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code")
    return None


class EcrClient:
    """Standardized ECR client for repository operations in one region."""

    def __init__(self, region: str, client=None):
        """
        Args:
            region: AWS region of the target registry
            client: Pre-built boto3 ECR client (created from the region if omitted)
        """
        self.region = region
        self._client = client or get_ecr_client(region)

    def describe_repository(self, repository_name: str) -> Dict[str, Any]:
        """Describe a single repository.

        Returns:
            The repository description returned by ECR

        Raises:
            RepositoryNotFoundError: If the repository does not exist
            RepositoryQueryError: On any other failure
        """
        try:
            response = self._client.describe_repositories(repositoryNames=[repository_name])
        except ClientError as e:
            if _error_code(e) == "RepositoryNotFoundException":
                raise RepositoryNotFoundError(repository_name) from e
            raise RepositoryQueryError(f"Failed to describe ECR repository '{repository_name}': {e}") from e
        except BotoCoreError as e:
            raise RepositoryQueryError(f"Failed to describe ECR repository '{repository_name}': {e}") from e

        repositories = response.get("repositories", [])
        if not repositories:
            raise RepositoryNotFoundError(repository_name)
        return repositories[0]

    def create_repository(
        self,
        repository_name: str,
        scan_on_push: bool = True,
        tag_mutability: str = "IMMUTABLE",
    ) -> Dict[str, Any]:
        """Create a repository with the given scanning and tag mutability policy.

        Raises:
            botocore.exceptions.ClientError: If ECR rejects the request
        """
        response = self._client.create_repository(
            repositoryName=repository_name,
            imageScanningConfiguration={"scanOnPush": scan_on_push},
            imageTagMutability=tag_mutability,
        )
        return response["repository"]

    def get_authorization_token(self) -> str:
        """Return the base64 "AWS:<password>" authorization token for this region."""
        response = self._client.get_authorization_token()
        return response["authorizationData"][0]["authorizationToken"]
