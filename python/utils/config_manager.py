#!/usr/bin/env python3
"""
Configuration Manager for the ECR image migrator

This module handles loading and managing configuration from config.yaml
and environment variables.
"""

import logging
import os
import re
from typing import Any, Dict, List, Optional

import yaml

KNOWN_TAG_MUTABILITY = ("IMMUTABLE", "MUTABLE")


class ConfigValidationError(Exception):
    """Raised when configuration validation fails"""


def _env_flag(name: str) -> Optional[bool]:
    """Read a boolean flag from the environment, None when unset."""
    value = os.environ.get(name)
    if value is None or value == "":
        return None
    return _as_bool(value)


def _as_bool(value: Any) -> bool:
    """Interpret YAML or environment values; strings like "false" are False."""
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


class ConfigManager:
    """Manages configuration for the ECR image migrator"""

    def __init__(self, config_file: str = None, validate: bool = True):
        """Initialize ConfigManager

        Args:
            config_file: Path to configuration YAML file (defaults to ../config.yaml or CONFIG_FILE env var)
            validate: If True, validate configuration on initialization
        """
        if config_file is None:
            config_file = os.environ.get("CONFIG_FILE", "../config.yaml")
        self.config_file = config_file
        self.config = self._load_config()

        if validate:
            self.validate_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file with defaults"""
        default_config = {
            "ecr": {
                "account_id": "",
                "region": "us-east-1",
                "base_repo": "docker-dev",
                "scan_on_push": True,
                "tag_mutability": "IMMUTABLE",
            },
            "source": {"scopes": ["docker-dev", "docker-release"]},
            "docker": {"binary": "docker", "platform": "linux/amd64", "disable_pull": False},
            "migration": {"floating_tags": ["docker:dind"]},
            "logs": {"list_base_path": "reports/", "file_prefix": "push-"},
            "reports": {"output_dir": "reports", "migration_summary": "migration-summary.json"},
        }

        try:
            if os.path.exists(self.config_file):
                with open(self.config_file, "r") as f:
                    user_config = yaml.safe_load(f) or {}
                return self._merge_config(default_config, user_config)
            else:
                logging.warning(f"Config file {self.config_file} not found, using defaults")
                return default_config
        except Exception as e:
            logging.error(f"Error loading config file: {e}")
            return default_config

    def _merge_config(self, default: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge user config with defaults"""
        result = default.copy()
        for key, value in user.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        return result

    # ECR configuration
    def get_account_id(self) -> str:
        """Get target AWS account id from environment or config"""
        return str(os.environ.get("AWS_ACCOUNT_ID") or self.config["ecr"]["account_id"] or "")

    def get_region(self) -> str:
        """Get target AWS region from environment or config"""
        return (
            os.environ.get("AWS_REGION")
            or os.environ.get("AWS_DEFAULT_REGION")
            or self.config["ecr"]["region"]
        )

    def get_base_repo(self) -> str:
        """Get the ECR base repository (docker-dev or docker-release)"""
        return os.environ.get("ECR_BASE_REPO") or self.config["ecr"]["base_repo"]

    def get_scan_on_push(self) -> bool:
        return _as_bool(self.config["ecr"].get("scan_on_push", True))

    def get_tag_mutability(self) -> str:
        return str(self.config["ecr"].get("tag_mutability", "IMMUTABLE")).upper()

    # Source registry configuration
    def get_source_scopes(self) -> List[str]:
        """Get the source path scopes an artifact may belong to"""
        return list(self.config.get("source", {}).get("scopes", ["docker-dev", "docker-release"]))

    # Container runtime configuration
    def get_docker_binary(self) -> str:
        return os.environ.get("DOCKER_BINARY") or self.config["docker"]["binary"]

    def get_docker_platform(self) -> str:
        return self.config["docker"]["platform"]

    def is_pull_disabled(self) -> bool:
        """Get whether docker pull should be skipped"""
        flag = _env_flag("DISABLE_PULL")
        if flag is not None:
            return flag
        return _as_bool(self.config["docker"].get("disable_pull", False))

    # Migration configuration
    def get_floating_tags(self) -> List[str]:
        """Get image name patterns that are always re-pushed even when present in ECR"""
        tags = self.config.get("migration", {}).get("floating_tags") or []
        return [str(tag) for tag in tags]

    # Output configuration
    def get_list_base_path(self) -> str:
        """Get the path prefix for the failed/pushed/existed outcome lists"""
        return os.environ.get("LIST_BASE_PATH") or self.config["logs"]["list_base_path"]

    def get_list_file_prefix(self) -> str:
        """Get the file name prefix of the outcome lists (e.g. "push-" gives push-failed.list)"""
        prefix = self.config["logs"].get("file_prefix")
        return "" if prefix is None else str(prefix)

    def get_output_dir(self) -> str:
        return self.config["reports"]["output_dir"]

    def get_migration_summary_path(self) -> str:
        """Get the path of the JSON migration summary report"""
        path = self.config["reports"]["migration_summary"]
        if os.path.isabs(path) or os.path.dirname(path):
            return path
        return os.path.join(self.get_output_dir(), path)

    def validate_config(self) -> None:
        """Validate configuration values

        Raises:
            ConfigValidationError: If configuration is invalid
        """
        errors = []
        warnings = []

        account_id = self.get_account_id()
        if account_id and not self._is_valid_account_id(account_id):
            errors.append(f"AWS account id '{account_id}' must be exactly 12 digits")

        region = self.get_region()
        if not region or not region.strip():
            errors.append("AWS region is required and cannot be empty")
        elif not self.is_valid_region(region):
            errors.append(f"AWS region '{region}' is not a valid region name (e.g. us-east-1)")

        scopes = self.get_source_scopes()
        if not scopes:
            errors.append("source.scopes must list at least one scope")

        base_repo = self.get_base_repo()
        if not base_repo or not base_repo.strip():
            errors.append("ECR base repository is required and cannot be empty")
        elif base_repo not in scopes:
            warnings.append(
                f"ECR base repository '{base_repo}' is not one of the source scopes {scopes}; "
                "every artifact will be skipped"
            )

        tag_mutability = self.get_tag_mutability()
        if tag_mutability not in KNOWN_TAG_MUTABILITY:
            errors.append(f"ecr.tag_mutability must be one of {KNOWN_TAG_MUTABILITY}, got: {tag_mutability}")

        if not self.get_docker_binary():
            errors.append("docker.binary is required and cannot be empty")

        platform = self.get_docker_platform()
        if not platform or "/" not in platform:
            errors.append(f"docker.platform must look like 'os/arch', got: {platform}")

        if not isinstance(self.config.get("migration", {}).get("floating_tags", []), list):
            errors.append("migration.floating_tags must be a list of image name patterns")

        for warning in warnings:
            logging.warning(f"Configuration warning: {warning}")

        if errors:
            error_msg = "Configuration validation failed:\n  " + "\n  ".join(errors)
            logging.error(error_msg)
            raise ConfigValidationError(error_msg)

    @staticmethod
    def _is_valid_account_id(account_id: str) -> bool:
        return bool(re.match(r"^\d{12}$", account_id))

    @staticmethod
    def is_valid_region(region: str) -> bool:
        return bool(re.match(r"^[a-z]{2}(-[a-z]+)+-\d+$", region))

    def print_config(self):
        """Print current configuration"""
        print("Current Configuration:")
        print(f"  AWS Account ID: {self.get_account_id() or 'Not set'}")
        print(f"  AWS Region: {self.get_region()}")
        print(f"  ECR Base Repository: {self.get_base_repo()}")
        print(f"  Scan On Push: {self.get_scan_on_push()}")
        print(f"  Tag Mutability: {self.get_tag_mutability()}")
        print(f"  Docker Binary: {self.get_docker_binary()}")
        print(f"  Docker Platform: {self.get_docker_platform()}")
        print(f"  Pull Disabled: {self.is_pull_disabled()}")
        print(f"  Floating Tags: {', '.join(self.get_floating_tags()) or 'None'}")
        print(f"  Outcome Lists: {self.get_list_base_path()}{self.get_list_file_prefix()}*.list")


# Global config manager instance
# Validation can be disabled by setting SKIP_CONFIG_VALIDATION=true environment variable
config_manager = ConfigManager(
    validate=os.environ.get("SKIP_CONFIG_VALIDATION", "").lower() not in ("true", "1", "yes")
)
