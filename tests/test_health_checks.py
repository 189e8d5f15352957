"""Unit tests for utils/health_checks.py"""

import os
import subprocess
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

from botocore.exceptions import ClientError, NoCredentialsError

_python_dir = Path(__file__).parent.parent / "python"
if str(_python_dir.absolute()) not in sys.path:
    sys.path.insert(0, str(_python_dir.absolute()))

# Set SKIP_CONFIG_VALIDATION before importing to avoid validation errors
os.environ["SKIP_CONFIG_VALIDATION"] = "true"

from utils.health_checks import HealthChecker, HealthCheckResult


def _config(account_id="111122223333", region="us-east-1"):
    config = MagicMock()
    config.get_account_id.return_value = account_id
    config.get_region.return_value = region
    config.get_base_repo.return_value = "docker-dev"
    config.get_source_scopes.return_value = ["docker-dev", "docker-release"]
    return config


class TestHealthCheckResult:
    """Tests for HealthCheckResult dataclass"""

    def test_health_check_result_without_details(self):
        result = HealthCheckResult(name="test_check", status=False, message="Test failed")

        assert result.status is False
        assert result.details is None


class TestConfigurationCheck:
    def test_valid_configuration(self):
        checker = HealthChecker(_config(), MagicMock())

        result = checker.check_configuration()

        assert result.status is True
        assert result.details == {"region": "us-east-1", "base_repo": "docker-dev"}

    def test_invalid_configuration(self):
        config = _config()
        config.validate_config.side_effect = Exception("AWS region '' is required")
        checker = HealthChecker(config, MagicMock())

        result = checker.check_configuration()

        assert result.status is False
        assert "region" in result.message

    def test_base_repo_override_outside_scopes(self):
        checker = HealthChecker(_config(), MagicMock())

        result = checker.check_configuration(base_repo="docker-prod")

        assert result.status is False
        assert "docker-prod" in result.message
        assert result.details["base_repo"] == "docker-prod"

    def test_region_override_is_checked(self):
        checker = HealthChecker(_config(), MagicMock())

        result = checker.check_configuration(region="useast1")

        assert result.status is False
        assert "useast1" in result.message

    def test_valid_overrides(self):
        checker = HealthChecker(_config(), MagicMock())

        result = checker.check_configuration(region="eu-west-1", base_repo="docker-release")

        assert result.status is True
        assert result.details == {"region": "eu-west-1", "base_repo": "docker-release"}


class TestContainerRuntimeCheck:
    def test_daemon_reachable(self):
        docker = MagicMock(binary="docker")
        docker.version.return_value = "27.1.1"
        checker = HealthChecker(_config(), docker)

        result = checker.check_container_runtime()

        assert result.status is True
        assert result.details["version"] == "27.1.1"

    def test_binary_missing(self):
        docker = MagicMock(binary="docker")
        docker.version.side_effect = FileNotFoundError("docker")
        checker = HealthChecker(_config(), docker)

        result = checker.check_container_runtime()

        assert result.status is False
        assert result.details["suggestions"]

    def test_daemon_unreachable(self):
        docker = MagicMock(binary="docker")
        docker.version.side_effect = subprocess.CalledProcessError(
            1, ["docker", "version"], stderr="Cannot connect to the Docker daemon"
        )
        checker = HealthChecker(_config(), docker)

        assert checker.check_container_runtime().status is False


class TestAwsCredentialsCheck:
    def test_credentials_for_target_account(self):
        with patch("utils.health_checks.boto3.client") as mock_client:
            mock_client.return_value.get_caller_identity.return_value = {
                "Account": "111122223333",
                "Arn": "arn:aws:iam::111122223333:user/ci",
            }
            result = HealthChecker(_config(), MagicMock()).check_aws_credentials()

        mock_client.assert_called_once_with("sts", region_name="us-east-1")
        assert result.status is True
        assert result.details["account"] == "111122223333"

    def test_uses_region_override(self):
        with patch("utils.health_checks.boto3.client") as mock_client:
            mock_client.return_value.get_caller_identity.return_value = {"Account": "111122223333", "Arn": "arn"}
            HealthChecker(_config(), MagicMock()).check_aws_credentials(region="ap-southeast-1")

        mock_client.assert_called_once_with("sts", region_name="ap-southeast-1")

    def test_other_account_is_not_fatal(self):
        with patch("utils.health_checks.boto3.client") as mock_client:
            mock_client.return_value.get_caller_identity.return_value = {"Account": "999999999999", "Arn": "arn"}
            result = HealthChecker(_config(), MagicMock()).check_aws_credentials("111122223333")

        assert result.status is True
        assert "999999999999" in result.message
        assert "111122223333" in result.message

    def test_no_credentials(self):
        with patch("utils.health_checks.boto3.client") as mock_client:
            mock_client.return_value.get_caller_identity.side_effect = NoCredentialsError()
            result = HealthChecker(_config(), MagicMock()).check_aws_credentials()

        assert result.status is False
        assert result.message == "AWS credentials not configured"

    def test_client_error(self):
        error = ClientError({"Error": {"Code": "ExpiredToken", "Message": "expired"}}, "GetCallerIdentity")
        with patch("utils.health_checks.boto3.client") as mock_client:
            mock_client.return_value.get_caller_identity.side_effect = error
            result = HealthChecker(_config(), MagicMock()).check_aws_credentials()

        assert result.status is False
        assert "ExpiredToken" in result.message


class TestRunAllChecks:
    def test_runs_every_check(self):
        checker = HealthChecker(_config(), MagicMock(binary="docker"))
        with patch.object(checker, "check_aws_credentials") as mock_aws:
            mock_aws.return_value = HealthCheckResult("aws_credentials", True, "ok")
            results = checker.run_all_checks("111122223333", "eu-west-1", "docker-release")

        assert [r.name for r in results] == ["configuration", "container_runtime", "aws_credentials"]
        assert results[0].details == {"region": "eu-west-1", "base_repo": "docker-release"}
        mock_aws.assert_called_once_with("111122223333", "eu-west-1")

    def test_print_health_report(self, capsys):
        checker = HealthChecker(_config(), MagicMock())
        results = [
            HealthCheckResult("configuration", True, "Configuration is valid"),
            HealthCheckResult("aws_credentials", False, "AWS credentials not configured", {"error": "hidden"}),
        ]

        assert checker.print_health_report(results) is False

        output = capsys.readouterr().out
        assert "AWS CREDENTIALS: UNHEALTHY" in output
        assert "hidden" not in output
