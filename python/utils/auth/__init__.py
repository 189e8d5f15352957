"""
Authentication providers for the target registry.

This module provides authentication helpers for AWS ECR (Elastic Container
Registry): a boto3 authorization token fed to the container runtime login.
"""

from utils.auth.providers import authenticate_ecr, decode_authorization_token

__all__ = [
    "authenticate_ecr",
    "decode_authorization_token",
]
