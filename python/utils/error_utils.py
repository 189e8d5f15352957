"""
Error message utilities for providing actionable guidance to users.

This module provides functions to create helpful error messages with
suggested fixes and troubleshooting steps for ECR, the container runtime
and configuration problems.
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCategory(Enum):
    """Categories of errors for better error handling"""

    AUTHENTICATION = "authentication"
    CONFIGURATION = "configuration"
    PERMISSION = "permission"
    RESOURCE = "resource"
    RUNTIME = "runtime"
    UNKNOWN = "unknown"


class ActionableError(Exception):
    """Exception with actionable guidance for users"""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        suggestions: Optional[List[str]] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize actionable error

        Args:
            message: Primary error message
            category: Error category for classification
            suggestions: List of suggested fixes
            details: Additional context information
        """
        self.message = message
        self.category = category
        self.suggestions = suggestions or []
        self.details = details or {}
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format the complete error message with suggestions"""
        lines = [self.message]

        if self.suggestions:
            lines.append("\nSuggested fixes:")
            for i, suggestion in enumerate(self.suggestions, 1):
                lines.append(f"   {i}. {suggestion}")

        if self.details:
            lines.append("\nAdditional details:")
            for key, value in self.details.items():
                lines.append(f"   {key}: {value}")

        return "\n".join(lines)


def create_ecr_auth_error(registry_host: str, error: Exception) -> ActionableError:
    """Create actionable error for ECR login failures"""
    error_str = str(error).lower()

    suggestions = [
        "Verify AWS credentials are configured (aws configure, AWS_PROFILE or instance role)",
        "Check the IAM policy allows ecr:GetAuthorizationToken",
        f"Verify the account id and region in the registry host: {registry_host}",
        "Verify the Docker daemon is running and reachable",
    ]

    if "credentials" in error_str:
        suggestions.insert(0, "Set AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY or AWS_PROFILE")

    if "expired" in error_str:
        suggestions.insert(0, "Refresh your AWS session token (aws sso login or re-assume the role)")

    return ActionableError(
        message=f"Failed to authenticate Docker to ECR registry {registry_host}",
        category=ErrorCategory.AUTHENTICATION,
        suggestions=suggestions,
        details={
            "registry_host": registry_host,
            "error_type": type(error).__name__,
            "error_message": str(error),
        },
    )


def create_ecr_api_error(operation: str, repository: str, region: str, error: Exception) -> ActionableError:
    """Create actionable error for ECR API failures other than a missing repository"""
    error_str = str(error).lower()

    suggestions = [
        "Verify AWS credentials are configured for the target account",
        f"Check the IAM policy allows ecr:{operation} on '{repository}'",
        f"Verify the region '{region}' is correct",
    ]

    if "accessdenied" in error_str or "not authorized" in error_str:
        suggestions.insert(0, "Attach ecr:DescribeRepositories and ecr:CreateRepository to the caller")

    if "invalidparameter" in error_str:
        suggestions.insert(0, "Repository names must be lowercase and may contain '/', '-', '_' and '.'")

    return ActionableError(
        message=f"ECR {operation} failed for repository '{repository}' in {region}",
        category=ErrorCategory.PERMISSION if "accessdenied" in error_str else ErrorCategory.RESOURCE,
        suggestions=suggestions,
        details={
            "operation": operation,
            "repository": repository,
            "region": region,
            "error_type": type(error).__name__,
            "error_message": str(error),
        },
    )


def create_container_runtime_error(binary: str, error: Exception) -> ActionableError:
    """Create actionable error when the container runtime CLI cannot be used"""
    error_str = str(error).lower()

    suggestions = [
        f"Verify '{binary}' is installed and on PATH",
        "Verify the Docker daemon is running (docker version)",
        "Set docker.binary in config.yaml or DOCKER_BINARY to use another runtime",
    ]

    if "permission denied" in error_str:
        suggestions.insert(0, "Add the current user to the 'docker' group or run with sufficient privileges")

    return ActionableError(
        message=f"Container runtime '{binary}' is not available",
        category=ErrorCategory.RUNTIME,
        suggestions=suggestions,
        details={
            "binary": binary,
            "error_type": type(error).__name__,
            "error_message": str(error),
        },
    )


def create_config_error(field: str, value: Any, reason: str) -> ActionableError:
    """Create actionable error for configuration validation failures"""
    suggestions = [
        f"Check the '{field}' value in config.yaml",
        "Verify the value matches the expected format",
        "Compare with the annotated config.yaml shipped with the project",
    ]

    if "account" in field.lower():
        suggestions.insert(1, "AWS account ids are exactly 12 digits")
    elif "region" in field.lower():
        suggestions.insert(1, "Regions look like 'us-east-1' or 'ap-southeast-1'")

    return ActionableError(
        message=f"Configuration error: Invalid value for '{field}'",
        category=ErrorCategory.CONFIGURATION,
        suggestions=suggestions,
        details={
            "field": field,
            "value": value,
            "reason": reason,
        },
    )
