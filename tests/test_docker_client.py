"""Unit tests for utils/docker_client.py"""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from utils.docker_client import DockerClient


@pytest.fixture
def docker_client():
    return DockerClient(binary="docker", platform="linux/amd64")


class TestDockerClientCommands:
    """Tests for the commands DockerClient runs"""

    def test_pull_pins_platform(self, docker_client):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            assert docker_client.pull("host/docker-dev/foo:1") is True
            cmd = mock_run.call_args[0][0]
            assert cmd == ["docker", "pull", "host/docker-dev/foo:1", "--platform", "linux/amd64"]

    def test_manifest_exists(self, docker_client):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            assert docker_client.manifest_exists("ecr/ref:1") is True
            assert mock_run.call_args[0][0] == ["docker", "manifest", "inspect", "ecr/ref:1"]

    def test_manifest_missing(self, docker_client):
        with patch("subprocess.run") as mock_run:
            mock_run.side_effect = subprocess.CalledProcessError(1, "docker", stderr="no such manifest")
            assert docker_client.manifest_exists("ecr/ref:1") is False

    def test_tag(self, docker_client):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            assert docker_client.tag("src:1", "dst:1") is True
            assert mock_run.call_args[0][0] == ["docker", "image", "tag", "src:1", "dst:1"]

    def test_push_failure(self, docker_client):
        with patch("subprocess.run") as mock_run:
            mock_run.side_effect = subprocess.CalledProcessError(1, "docker", stderr="denied")
            assert docker_client.push("dst:1") is False

    def test_image_exists(self, docker_client):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            assert docker_client.image_exists("dst:1") is True
            assert mock_run.call_args[0][0] == ["docker", "image", "inspect", "dst:1"]

    def test_missing_binary_returns_false(self):
        client = DockerClient(binary="no-such-docker")
        with patch("subprocess.run", side_effect=FileNotFoundError("no-such-docker")):
            assert client.pull("foo:1") is False

    def test_custom_binary(self):
        client = DockerClient(binary="podman", platform="linux/arm64")
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            client.pull("foo:1")
            assert mock_run.call_args[0][0] == ["podman", "pull", "foo:1", "--platform", "linux/arm64"]


class TestDockerClientLogin:
    """Tests for DockerClient.login and version"""

    def test_login_passes_password_on_stdin(self, docker_client):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            docker_client.login("111122223333.dkr.ecr.us-east-1.amazonaws.com", "AWS", "secret")

            cmd = mock_run.call_args[0][0]
            assert cmd == [
                "docker",
                "login",
                "--username",
                "AWS",
                "--password-stdin",
                "111122223333.dkr.ecr.us-east-1.amazonaws.com",
            ]
            assert "secret" not in cmd
            assert mock_run.call_args[1]["input"] == "secret"

    def test_login_failure_raises(self, docker_client):
        with patch("subprocess.run") as mock_run:
            mock_run.side_effect = subprocess.CalledProcessError(1, "docker", stderr="unauthorized")
            with pytest.raises(subprocess.CalledProcessError):
                docker_client.login("registry", "AWS", "secret")

    def test_version(self, docker_client):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stdout="27.1.1\n")
            assert docker_client.version() == "27.1.1"

    def test_from_config(self):
        mock_config = MagicMock()
        mock_config.get_docker_binary.return_value = "nerdctl"
        mock_config.get_docker_platform.return_value = "linux/arm64"
        client = DockerClient.from_config(mock_config)
        assert client.binary == "nerdctl"
        assert client.platform == "linux/arm64"
