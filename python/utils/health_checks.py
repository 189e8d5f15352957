"""
Health check utilities for verifying system connectivity and configuration.

This module provides preflight checks for:
- Configuration validity
- Container runtime availability
- AWS credentials for the target account
"""

import subprocess
from dataclasses import dataclass
from typing import Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from utils.config_manager import ConfigManager
from utils.config_manager import config_manager as default_config_manager
from utils.docker_client import DockerClient
from utils.error_utils import create_container_runtime_error
from utils.logging_utils import get_logger

logger = get_logger(__name__)


@dataclass
class HealthCheckResult:
    """Result of a health check"""

    name: str
    status: bool  # True if healthy, False if unhealthy
    message: str
    details: Optional[Dict] = None


class HealthChecker:
    """Performs health checks on system components"""

    def __init__(self, config_manager=None, docker_client: Optional[DockerClient] = None):
        self.config_manager = config_manager or default_config_manager
        self.docker_client = docker_client or DockerClient.from_config(self.config_manager)
        self.logger = get_logger(self.__class__.__name__)

    def check_configuration(self, region: Optional[str] = None, base_repo: Optional[str] = None) -> HealthCheckResult:
        """Check the configuration is valid, including region and base repository overrides

        Args:
            region: Region the run will use (defaults to the configured one)
            base_repo: Base repository the run will use (defaults to the configured one)
        """
        region = region or self.config_manager.get_region()
        base_repo = base_repo or self.config_manager.get_base_repo()
        details = {"region": region, "base_repo": base_repo}

        try:
            self.config_manager.validate_config()
        except Exception as e:
            return HealthCheckResult(
                name="configuration",
                status=False,
                message=f"Configuration validation failed: {str(e)}",
                details={**details, "error": str(e)},
            )

        if not ConfigManager.is_valid_region(region):
            return HealthCheckResult(
                name="configuration",
                status=False,
                message=f"AWS region '{region}' is not a valid region name (e.g. us-east-1)",
                details=details,
            )

        scopes = self.config_manager.get_source_scopes()
        if base_repo not in scopes:
            return HealthCheckResult(
                name="configuration",
                status=False,
                message=f"Base repository '{base_repo}' is not one of the source scopes {scopes}",
                details=details,
            )

        return HealthCheckResult(
            name="configuration",
            status=True,
            message="Configuration is valid",
            details=details,
        )

    def check_container_runtime(self) -> HealthCheckResult:
        """Check the container runtime CLI is installed and its daemon answers"""
        binary = self.docker_client.binary
        try:
            version = self.docker_client.version()
            return HealthCheckResult(
                name="container_runtime",
                status=True,
                message=f"{binary} daemon reachable (server version {version})",
                details={"binary": binary, "version": version},
            )
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            actionable_error = create_container_runtime_error(binary, e)
            return HealthCheckResult(
                name="container_runtime",
                status=False,
                message=actionable_error.message,
                details={"binary": binary, "error": str(e), "suggestions": actionable_error.suggestions},
            )

    def check_aws_credentials(self, account_id: Optional[str] = None, region: Optional[str] = None) -> HealthCheckResult:
        """Check AWS credentials resolve, and belong to the target account when one is given"""
        account_id = account_id or self.config_manager.get_account_id()
        region = region or self.config_manager.get_region()

        try:
            identity = boto3.client("sts", region_name=region).get_caller_identity()
        except NoCredentialsError:
            return HealthCheckResult(
                name="aws_credentials",
                status=False,
                message="AWS credentials not configured",
                details={"region": region, "suggestions": ["Configure AWS credentials: aws configure"]},
            )
        except (ClientError, BotoCoreError) as e:
            return HealthCheckResult(
                name="aws_credentials",
                status=False,
                message=f"Failed to resolve AWS caller identity: {e}",
                details={"region": region, "error": str(e)},
            )

        caller_account = identity.get("Account")
        if account_id and caller_account != account_id:
            # Warn only
            return HealthCheckResult(
                name="aws_credentials",
                status=True,
                message=f"Credentials belong to account {caller_account}, target registry is {account_id}",
                details={"arn": identity.get("Arn"), "account": caller_account},
            )

        return HealthCheckResult(
            name="aws_credentials",
            status=True,
            message=f"AWS credentials resolved for account {caller_account}",
            details={"arn": identity.get("Arn"), "account": caller_account},
        )

    def run_all_checks(
        self,
        account_id: Optional[str] = None,
        region: Optional[str] = None,
        base_repo: Optional[str] = None,
    ) -> List[HealthCheckResult]:
        """Run all health checks against the values the run will actually use"""
        return [
            self.check_configuration(region, base_repo),
            self.check_container_runtime(),
            self.check_aws_credentials(account_id, region),
        ]

    def print_health_report(self, results: List[HealthCheckResult]) -> bool:
        """Print a formatted health check report

        Returns:
            True if all checks passed, False otherwise
        """
        print("\n" + "=" * 60)
        print("Health Check Report")
        print("=" * 60)

        all_healthy = True

        for result in results:
            status_icon = "✓" if result.status else "✗"
            status_text = "HEALTHY" if result.status else "UNHEALTHY"

            print(f"\n{status_icon} {result.name.upper().replace('_', ' ')}: {status_text}")
            print(f"   {result.message}")

            if result.details:
                for key, value in result.details.items():
                    if key != "error":
                        print(f"   {key}: {value}")

            if not result.status:
                all_healthy = False

        print("\n" + "=" * 60)

        if all_healthy:
            print("✓ All health checks passed")
        else:
            print("✗ Some health checks failed - please review the issues above")

        print("=" * 60 + "\n")

        return all_healthy
