#!/usr/bin/env python3
"""
Authenticate Docker to an AWS ECR registry.

Usage examples:
  python ecr_auth.py --account-id 123456789012 --region ap-southeast-1
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

# Add parent directory to path for imports
_parent_dir = Path(__file__).parent.parent.absolute()
if str(_parent_dir) not in sys.path:
    sys.path.insert(0, str(_parent_dir))

from utils.auth import authenticate_ecr
from utils.config_manager import config_manager
from utils.docker_client import DockerClient
from utils.error_utils import ActionableError
from utils.logging_utils import get_logger, setup_logging

logger = get_logger(__name__)


def parse_arguments(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Authenticate Docker to an AWS ECR registry")
    parser.add_argument("--account-id", help="AWS account id (default: from config)")
    parser.add_argument("--region", help="AWS region (default: from config)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging()
    args = parse_arguments(argv)
    account_id = args.account_id or config_manager.get_account_id()
    region = args.region or config_manager.get_region()

    if not account_id or not region:
        logger.error("Missing arguments for ECR authentication.")
        logger.error("Usage: ecr_auth.py --account-id <aws_account_id> --region <aws_region>")
        return 1

    try:
        authenticate_ecr(account_id, region, docker_client=DockerClient.from_config(config_manager))
    except ActionableError as e:
        logger.error(e.format_message())
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
