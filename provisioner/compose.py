"""Thin driver around the `docker compose` CLI for one project directory."""
import logging
import subprocess
from pathlib import Path
from typing import Callable

import docker

import config
from provisioner.errors import CommandFailed, ProbeError
from provisioner.renderer import ENV_SETUP_PATH

logger = logging.getLogger(__name__)


class ComposeProject:
    """A compose project rooted at `root`, named by COMPOSE_PROJECT_NAME."""

    def __init__(
        self,
        name: str,
        root: Path = Path("."),
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
        client_factory: Callable[[], docker.DockerClient] = docker.from_env,
    ):
        self.name = name
        self.root = Path(root)
        self._run_process = runner
        self._client_factory = client_factory

    def _run(self, args: list[str], capture: bool = False, stdin: str | None = None, hint: str = "") -> str:
        command = ["docker", "compose", "-p", self.name, "--env-file", str(ENV_SETUP_PATH), *args]
        logger.debug("running %s", " ".join(command))
        try:
            result = self._run_process(
                command,
                cwd=str(self.root),
                text=True,
                input=stdin,
                capture_output=capture,
            )
        except FileNotFoundError as e:
            raise CommandFailed(command, 127, "Is docker installed and in your PATH?") from e
        if result.returncode != 0:
            raise CommandFailed(command, result.returncode, hint)
        return result.stdout if capture else ""

    def _containers(self, service: str | None = None, include_stopped: bool = True) -> list:
        labels = [f"com.docker.compose.project={self.name}"]
        if service:
            labels.append(f"com.docker.compose.service={service}")
        client = self._client_factory()
        try:
            return client.containers.list(all=include_stopped, filters={"label": labels})
        finally:
            client.close()

    def has_containers(self) -> bool:
        """True if any container (running or not) belongs to this project."""
        try:
            return bool(self._containers())
        except docker.errors.DockerException as e:
            logger.debug("could not list containers for %s: %s", self.name, e)
            return False

    def down(self) -> None:
        self._run(["down"])

    def up(self) -> None:
        """Build and start the environment detached, replacing any earlier containers."""
        if self.has_containers():
            logger.info("stopping existing containers for %s", self.name)
            self.down()
        self._run(["up", "-d", "--build"])

    def exec(self, script: str, service: str = config.APP_SERVICE, hint: str = "") -> None:
        self._run(["exec", service, "bash", "-c", script], hint=hint)

    def exec_output(self, script: str, service: str = config.APP_SERVICE) -> str:
        return self._run(["exec", "-T", service, "bash", "-c", script], capture=True)

    def service_running(self, service: str = config.APP_SERVICE) -> bool:
        """Readiness probe: is at least one container of `service` in the running state."""
        try:
            containers = self._containers(service)
        except docker.errors.DockerException as e:
            raise ProbeError(str(e)) from e
        return any(c.status == "running" for c in containers)
