"""
Docker CLI client for image migration.

This module wraps the container runtime operations the migrator needs (pull,
manifest inspect, tag, push, image inspect, login) behind a small class so
they can be mocked in tests. Every call blocks until the CLI exits; nothing
is retried.
"""

import subprocess
from typing import List

from utils.logging_utils import get_logger, log_command

logger = get_logger(__name__)


class DockerClient:
    """Standardized Docker CLI client for migration operations."""

    def __init__(self, binary: str = "docker", platform: str = "linux/amd64"):
        """Initialize DockerClient.

        Args:
            binary: Container runtime executable (docker or a compatible CLI)
            platform: Platform pinned on every pull
        """
        self.binary = binary
        self.platform = platform

    @classmethod
    def from_config(cls, config_manager) -> "DockerClient":
        return cls(binary=config_manager.get_docker_binary(), platform=config_manager.get_docker_platform())

    def _build_command(self, args: List[str]) -> List[str]:
        return [self.binary] + args

    def run_docker_command(self, args: List[str], quiet: bool = False) -> bool:
        """Run a docker command and report whether it exited successfully.

        Args:
            args: Arguments after the docker binary
            quiet: Only log failures at debug level (existence probes fail routinely)

        Returns:
            True if the command exited 0, False otherwise
        """
        cmd = self._build_command(args)
        log_command(logger, cmd)

        try:
            subprocess.run(cmd, capture_output=True, text=True, check=True)
            return True
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            if quiet:
                logger.debug(f"{' '.join(cmd)} exited {e.returncode}: {stderr}")
            else:
                logger.error(f"Docker command failed (exit {e.returncode}): {' '.join(cmd)}")
                if stderr:
                    logger.error(f"Error: {stderr}")
            return False
        except FileNotFoundError as e:
            logger.error(f"Container runtime '{self.binary}' not found: {e}")
            return False

    def pull(self, reference: str) -> bool:
        """Pull an image for the pinned platform."""
        return self.run_docker_command(["pull", reference, "--platform", self.platform])

    def manifest_exists(self, reference: str) -> bool:
        """Probe the registry for a manifest without downloading the image."""
        return self.run_docker_command(["manifest", "inspect", reference], quiet=True)

    def tag(self, source: str, target: str) -> bool:
        return self.run_docker_command(["image", "tag", source, target])

    def push(self, reference: str) -> bool:
        return self.run_docker_command(["push", reference])

    def image_exists(self, reference: str) -> bool:
        """Check the reference resolves to an image known to the runtime.

        This inspects the local image store only; it does not query the registry.
        """
        return self.run_docker_command(["image", "inspect", reference], quiet=True)

    def login(self, registry: str, username: str, password: str) -> None:
        """Log in to a registry with the password on stdin.

        Raises:
            subprocess.CalledProcessError: If the login fails
        """
        cmd = self._build_command(["login", "--username", username, "--password-stdin", registry])
        log_command(logger, cmd)
        subprocess.run(cmd, input=password, capture_output=True, text=True, check=True)

    def version(self) -> str:
        """Return the runtime server version.

        Raises:
            subprocess.CalledProcessError: If the daemon is unreachable
            FileNotFoundError: If the binary is not installed
        """
        result = subprocess.run(
            self._build_command(["version", "--format", "{{.Server.Version}}"]),
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()
