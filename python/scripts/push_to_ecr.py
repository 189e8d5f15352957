#!/usr/bin/env python3
"""
Migrate Docker images from the artifact registry into AWS ECR.

For every artifact reference given on the command line or in a file, this
script pulls the image, makes sure the ECR repository exists, retags and
pushes it, and verifies the push. Images already present in ECR are skipped,
except floating tags such as docker:dind which are refreshed.

Each artifact appends one line to one of three lists under --list-base-path:
  push-failed.list   [FAILED_*] <artifact>
  push-pushed.list   [PUSHED] <ecr reference>
  push-existed.list  [SKIP-SCOPE] <artifact> / [SKIP-EXISTED] <ecr reference>
The "push-" file name prefix comes from logs.file_prefix in config.yaml; set it
to "partior-push-" to keep the file names the earlier shell tooling wrote.

Usage examples:
  # Migrate one image into docker-dev
  python push_to_ecr.py artifactory.example.com/docker-dev/foo/bar:1.0 \\
    --account-id 111122223333 --region us-east-1 --base-repo docker-dev

  # Migrate a list of images, logging in to ECR first
  python push_to_ecr.py --artifact-file images.txt --account-id 111122223333 --login

  # Images already pulled locally
  python push_to_ecr.py --artifact-file images.txt --account-id 111122223333 --disable-pull
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

# Add parent directory to path for imports
_parent_dir = Path(__file__).parent.parent.absolute()
if str(_parent_dir) not in sys.path:
    sys.path.insert(0, str(_parent_dir))

from utils.auth import authenticate_ecr
from utils.config_manager import config_manager
from utils.docker_client import DockerClient
from utils.error_utils import create_config_error
from utils.health_checks import HealthChecker
from utils.image_migrator import FloatingTagPolicy, ImageMigrator, MigrationResult
from utils.logging_utils import get_logger, log_exception, setup_logging
from utils.outcome_log import OutcomeLog
from utils.report_utils import build_results_table, save_json, summarize_results
from utils.repository_ensurer import RepositoryEnsurer

logger = get_logger(__name__)


def read_artifacts_from_file(file_path: str) -> List[str]:
    """Read artifact references from a file, one per line (comments starting with # are ignored)."""
    artifacts = []
    with open(file_path, "r") as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#"):
                artifacts.append(line)
    return artifacts


def build_migrator(docker_client: DockerClient, list_base_path: str) -> ImageMigrator:
    """Wire an ImageMigrator from the global configuration."""
    return ImageMigrator(
        docker_client=docker_client,
        repository_ensurer=RepositoryEnsurer.from_config(config_manager),
        outcome_log=OutcomeLog(list_base_path, file_prefix=config_manager.get_list_file_prefix()),
        floating_tag_policy=FloatingTagPolicy(config_manager.get_floating_tags()),
        scopes=config_manager.get_source_scopes(),
    )


def migrate_artifacts(
    migrator: ImageMigrator,
    artifacts: List[str],
    account_id: str,
    base_repo: str,
    region: str,
    disable_pull: bool = False,
) -> List[MigrationResult]:
    """Process artifacts one after another; a failure never stops the loop."""
    results = []
    for i, artifact in enumerate(artifacts, 1):
        logger.info(f"[{i}/{len(artifacts)}] {artifact}")
        results.append(migrator.migrate(artifact, account_id, base_repo, region, disable_pull=disable_pull))
    return results


def parse_arguments(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        description="Migrate Docker images from the artifact registry into AWS ECR",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python push_to_ecr.py artifactory.example.com/docker-dev/foo/bar:1.0 --account-id 111122223333
  python push_to_ecr.py --artifact-file images.txt --account-id 111122223333 --base-repo docker-release --login
        """,
    )

    parser.add_argument("artifacts", nargs="*", help="Source artifact references")
    parser.add_argument("--artifact-file", help="File with one artifact reference per line")
    parser.add_argument("--account-id", help="Target AWS account id (default: from config)")
    parser.add_argument("--region", help="Target AWS region (default: from config)")
    parser.add_argument(
        "--base-repo",
        help="Target ECR base repository, docker-dev or docker-release (default: from config)",
    )
    parser.add_argument(
        "--disable-pull",
        action="store_true",
        default=None,
        help="Skip docker pull and use images already present locally",
    )
    parser.add_argument(
        "--list-base-path",
        help="Path prefix for the failed/pushed/existed lists (default: from config)",
    )
    parser.add_argument("--login", action="store_true", help="Log in to ECR before migrating")
    parser.add_argument("--skip-health-checks", action="store_true", help="Skip preflight health checks")
    parser.add_argument("--show-config", action="store_true", help="Print the effective configuration and exit")
    parser.add_argument(
        "--output",
        help="Output file for the migration summary (default: reports/migration-summary.json)",
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging()
    args = parse_arguments(argv)

    account_id = args.account_id or config_manager.get_account_id()
    region = args.region or config_manager.get_region()
    base_repo = args.base_repo or config_manager.get_base_repo()
    disable_pull = config_manager.is_pull_disabled() if args.disable_pull is None else args.disable_pull
    list_base_path = args.list_base_path or config_manager.get_list_base_path()
    output_file = args.output or config_manager.get_migration_summary_path()

    if args.show_config:
        config_manager.print_config()
        return 0

    if not account_id:
        error = create_config_error("ecr.account_id", account_id, "No AWS account id given")
        logger.error(error.format_message())
        logger.error("Use --account-id, AWS_ACCOUNT_ID or ecr.account_id in config.yaml")
        return 1

    try:
        artifacts = list(args.artifacts)
        if args.artifact_file:
            artifacts.extend(read_artifacts_from_file(args.artifact_file))
        if not artifacts:
            logger.info("No artifacts given. Nothing to migrate.")
            return 0

        logger.info("=" * 60)
        logger.info("   ECR IMAGE MIGRATION")
        logger.info("=" * 60)
        logger.info(f"Target registry:   {account_id}.dkr.ecr.{region}.amazonaws.com")
        logger.info(f"Base repository:   {base_repo}")
        logger.info(f"Artifacts:         {len(artifacts)}")
        logger.info(f"Pull disabled:     {disable_pull}")
        logger.info(f"Outcome lists:     {list_base_path}")
        logger.info("")

        docker_client = DockerClient.from_config(config_manager)

        if not args.skip_health_checks:
            checker = HealthChecker(config_manager, docker_client)
            results = checker.run_all_checks(account_id, region, base_repo)
            if not all(result.status for result in results):
                checker.print_health_report(results)
                logger.error("Health checks failed, aborting migration")
                return 1

        if args.login:
            authenticate_ecr(account_id, region, docker_client=docker_client)

        migrator = build_migrator(docker_client, list_base_path)
        results = migrate_artifacts(migrator, artifacts, account_id, base_repo, region, disable_pull=disable_pull)

        summary = summarize_results(results)
        save_json(
            output_file,
            {
                "summary": summary,
                "results": [
                    {"artifact": r.artifact, "outcome": r.outcome.tag, "target": r.target_reference}
                    for r in results
                ],
                "metadata": {
                    "account_id": account_id,
                    "region": region,
                    "base_repo": base_repo,
                    "disable_pull": disable_pull,
                    "list_base_path": list_base_path,
                    "timestamp": datetime.now().isoformat(),
                },
            },
        )

        logger.info("")
        logger.info("=" * 60)
        logger.info("   MIGRATION SUMMARY")
        logger.info("=" * 60)
        logger.info("\n" + build_results_table(results))
        logger.info(f"Succeeded: {summary['succeeded']}  Failed: {summary['failed']}")

        return 1 if summary["failed"] else 0

    except KeyboardInterrupt:
        logger.warning("\nMigration interrupted by user")
        return 1
    except Exception as e:
        log_exception(logger, "Error in migration", exc_info=e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
