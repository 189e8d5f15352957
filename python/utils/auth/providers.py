"""
Authentication provider implementations for ECR.

This module contains the login logic used before pushing images to ECR.
"""

import base64
import subprocess
from typing import Optional, Tuple

from utils.docker_client import DockerClient
from utils.ecr_client import EcrClient
from utils.error_utils import create_ecr_auth_error
from utils.image_reference import registry_host
from utils.logging_utils import get_logger

logger = get_logger(__name__)


def decode_authorization_token(token_b64: str) -> Tuple[str, str]:
    """Split a base64 ECR authorization token into (username, password)."""
    token = base64.b64decode(token_b64).decode("utf-8")
    username, password = token.split(":", 1)
    return username, password


def authenticate_ecr(
    account_id: str,
    region: str,
    docker_client: Optional[DockerClient] = None,
    ecr_client: Optional[EcrClient] = None,
) -> str:
    """Authenticate the container runtime to an ECR registry.

    Uses boto3 to get an ECR authorization token and logs in with the
    password on stdin (no aws CLI or shell needed).

    Args:
        account_id: The AWS account id (e.g. "123456789012")
        region: The AWS region of the registry (e.g. "ap-southeast-1")
        docker_client: Runtime client used for the login
        ecr_client: ECR client for the region

    Returns:
        The registry host that was logged in to

    Raises:
        ValueError: If the account id or region is missing
        ActionableError: If fetching the token or the login fails
    """
    if not account_id or not region:
        raise ValueError("Both account id and region are required to authenticate to ECR")

    host = registry_host(account_id, region)
    logger.info(f"Attempting Docker login to ECR registry: {host}")

    docker_client = docker_client or DockerClient()
    try:
        ecr_client = ecr_client or EcrClient(region)
        username, password = decode_authorization_token(ecr_client.get_authorization_token())
        docker_client.login(host, username, password)
    except subprocess.CalledProcessError as e:
        logger.error(f"Failed to authenticate Docker to ECR registry: {host}. Exit code: {e.returncode}")
        if e.stderr:
            logger.error(f"  stderr: {e.stderr}")
        raise create_ecr_auth_error(host, e) from e
    except Exception as e:
        logger.error(f"Unexpected error during ECR authentication: {e}")
        raise create_ecr_auth_error(host, e) from e

    logger.info(f"Successfully authenticated Docker to ECR registry: {host}")
    return host
