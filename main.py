import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

from rich.console import Console  # noqa: E402
from rich.markup import escape  # noqa: E402

import config  # noqa: E402
from frameworks import javascript, laravel  # noqa: E402
from provisioner.compose import ComposeProject  # noqa: E402
from provisioner.errors import ProvisioningError, ReadinessTimeout  # noqa: E402
from provisioner.models import ProjectConfig, ProjectType  # noqa: E402
from provisioner.readiness import http_responds, wait_until  # noqa: E402
from provisioner.renderer import ENV_SETUP_PATH, write_environment  # noqa: E402
from wizard.environment import collect_environment  # noqa: E402
from wizard.questions import Ask  # noqa: E402

logger = logging.getLogger(__name__)
console = Console()

STACKUP_BANNER = r"""
  ___ _____ _   ___ _  ___   _ ___
 / __|_   _/_\ / __| |/ / | | | _ \
 \__ \ | |/ _ \ (__| ' <| |_| |  _/
 |___/ |_/_/ \_\___|_|\_\\___/|_|
   php · mysql · redis · nginx"""

SCAFFOLDERS = {
    ProjectType.LARAVEL: laravel.create_project,
    ProjectType.VUE: javascript.create_project,
    ProjectType.NUXT: javascript.create_project,
}


def console_ask(prompt: str) -> str:
    return console.input(prompt, markup=False)


def wait_for_app(project: ProjectConfig, compose: ComposeProject) -> None:
    console.print("Waiting for containers to be ready...")
    wait_until(
        compose.service_running,
        max_attempts=config.CONTAINER_READY_ATTEMPTS,
        interval=config.CONTAINER_READY_INTERVAL,
        description=f"{project.name}-{config.APP_SERVICE}",
        timeout_message=(
            f"Container {project.name}-{config.APP_SERVICE} is not ready after waiting. "
            "Please check docker logs for issues."
        ),
        on_retry=lambda attempt, total: console.print(
            f"[dim]Attempt {attempt}/{total}: Container not ready yet...[/dim]"
        ),
    )


def check_web_server(project: ProjectConfig) -> None:
    """Non-fatal: tell the operator whether nginx answers on its host port."""
    try:
        wait_until(
            lambda: http_responds(project.app_url),
            max_attempts=config.WEB_READY_ATTEMPTS,
            interval=config.WEB_READY_INTERVAL,
            description="nginx",
        )
        console.print(f"[green]Web server is up at {project.app_url}[/green]")
    except ReadinessTimeout:
        console.print(f"[yellow]Web server did not answer at {project.app_url} yet.[/yellow]")


def run(ask: Ask = console_ask, root: Path = Path(".")) -> ProjectConfig:
    """The whole provisioning workflow. Raises ProvisioningError on any fatal step."""
    project = collect_environment(ask)

    write_environment(project, root)
    console.print(f"Dockerfile has been created with PHP {project.php_version}")
    console.print(f".env.setup file has been created with project name {project.name}")
    if config.SHOW_ENV:
        console.print("\n--- .env.setup content ---", style="dim")
        console.print((Path(root) / ENV_SETUP_PATH).read_text(), markup=False, highlight=False)
        console.print("--- end .env.setup content ---\n", style="dim")

    compose = ComposeProject(project.name, root)
    console.print("\nStarting Docker containers...")
    compose.up()
    console.print("\nDocker containers are starting up")
    console.print(f"Project name: {project.name}")

    wait_for_app(project, compose)
    SCAFFOLDERS[project.project_type](project, compose, ask)
    check_web_server(project)

    console.print("\n[dim]Note: The .env.setup file contains your Docker configuration[/dim]")
    return project


def main():
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=config.LOG_LEVEL,
    )
    console.print(STACKUP_BANNER, style="green", markup=False, highlight=False)

    try:
        run()
    except ProvisioningError as e:
        console.print(f"\n[red]Error: {escape(str(e))}[/red]", highlight=False)
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted.[/yellow]")
        sys.exit(130)
    except Exception as e:
        logger.exception("unexpected failure")
        console.print(f"\n[red]An error occurred: {escape(str(e))}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
