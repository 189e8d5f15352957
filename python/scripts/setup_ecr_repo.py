#!/usr/bin/env python3
"""
Create an ECR repository if it doesn't already exist.

New repositories get scan-on-push enabled and immutable tags (configurable
through ecr.scan_on_push and ecr.tag_mutability in config.yaml).

Usage examples:
  python setup_ecr_repo.py docker-dev/my-app --region ap-southeast-1
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

# Add parent directory to path for imports
_parent_dir = Path(__file__).parent.parent.absolute()
if str(_parent_dir) not in sys.path:
    sys.path.insert(0, str(_parent_dir))

from utils.config_manager import config_manager
from utils.logging_utils import get_logger, log_exception, setup_logging
from utils.repository_ensurer import RepositoryEnsurer

logger = get_logger(__name__)


def parse_arguments(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Create an ECR repository if it doesn't already exist")
    parser.add_argument("repository", help="Full ECR repository name without tag (e.g. docker-dev/my-app)")
    parser.add_argument("--region", help="AWS region (default: from config)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging()
    args = parse_arguments(argv)
    region = args.region or config_manager.get_region()

    try:
        status = RepositoryEnsurer.from_config(config_manager).ensure(args.repository, region)
    except ValueError as e:
        logger.error(str(e))
        return 1
    except Exception as e:
        log_exception(logger, "Error ensuring ECR repository", exc_info=e)
        return 1

    return 0 if status.succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
