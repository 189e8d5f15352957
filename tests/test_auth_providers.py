"""Unit tests for utils/auth/providers.py"""

import base64
import subprocess
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import NoCredentialsError

_python_dir = Path(__file__).parent.parent / "python"
if str(_python_dir.absolute()) not in sys.path:
    sys.path.insert(0, str(_python_dir.absolute()))

from utils.auth.providers import authenticate_ecr, decode_authorization_token
from utils.error_utils import ActionableError, ErrorCategory


def _token(username="AWS", password="secret-password"):
    return base64.b64encode(f"{username}:{password}".encode()).decode()


class TestDecodeAuthorizationToken:
    """Tests for decode_authorization_token"""

    def test_splits_username_and_password(self):
        assert decode_authorization_token(_token()) == ("AWS", "secret-password")

    def test_password_may_contain_colons(self):
        assert decode_authorization_token(_token(password="a:b:c")) == ("AWS", "a:b:c")

    def test_token_without_separator_fails(self):
        with pytest.raises(ValueError):
            decode_authorization_token(base64.b64encode(b"no-separator").decode())


class TestAuthenticateEcr:
    """Tests for authenticate_ecr"""

    def test_successful_login(self):
        mock_ecr = MagicMock()
        mock_ecr.get_authorization_token.return_value = _token()
        mock_docker = MagicMock()

        host = authenticate_ecr("123456789012", "ap-southeast-1", docker_client=mock_docker, ecr_client=mock_ecr)

        assert host == "123456789012.dkr.ecr.ap-southeast-1.amazonaws.com"
        mock_docker.login.assert_called_once_with(
            "123456789012.dkr.ecr.ap-southeast-1.amazonaws.com", "AWS", "secret-password"
        )

    def test_builds_ecr_client_for_region(self):
        mock_docker = MagicMock()
        with patch("utils.auth.providers.EcrClient") as mock_ecr_class:
            mock_ecr_class.return_value.get_authorization_token.return_value = _token()
            authenticate_ecr("123456789012", "eu-west-1", docker_client=mock_docker)

        mock_ecr_class.assert_called_once_with("eu-west-1")

    @pytest.mark.parametrize("account_id,region", [("", "us-east-1"), ("123456789012", ""), (None, None)])
    def test_missing_arguments(self, account_id, region):
        with pytest.raises(ValueError, match="required"):
            authenticate_ecr(account_id, region, docker_client=MagicMock(), ecr_client=MagicMock())

    def test_docker_login_failure(self):
        mock_ecr = MagicMock()
        mock_ecr.get_authorization_token.return_value = _token()
        mock_docker = MagicMock()
        mock_docker.login.side_effect = subprocess.CalledProcessError(
            1, ["docker", "login"], stderr="Error response from daemon: login attempt failed"
        )

        with pytest.raises(ActionableError) as exc_info:
            authenticate_ecr("123456789012", "us-east-1", docker_client=mock_docker, ecr_client=mock_ecr)

        assert exc_info.value.category == ErrorCategory.AUTHENTICATION
        assert exc_info.value.details["registry_host"] == "123456789012.dkr.ecr.us-east-1.amazonaws.com"
        assert isinstance(exc_info.value.__cause__, subprocess.CalledProcessError)

    def test_token_failure(self):
        mock_ecr = MagicMock()
        mock_ecr.get_authorization_token.side_effect = NoCredentialsError()
        mock_docker = MagicMock()

        with pytest.raises(ActionableError) as exc_info:
            authenticate_ecr("123456789012", "us-east-1", docker_client=mock_docker, ecr_client=mock_ecr)

        assert "credentials" in exc_info.value.suggestions[0].lower()
        mock_docker.login.assert_not_called()
