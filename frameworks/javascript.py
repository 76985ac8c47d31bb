"""Vue and Nuxt starters: run the framework's own `npm create` inside the app container."""
from rich.console import Console

import config
from provisioner.compose import ComposeProject
from provisioner.models import ProjectConfig, ProjectType
from wizard.questions import Ask

console = Console()

# npm create <package>, number of installer prompts answered with their default
CREATE_PACKAGES = {
    ProjectType.VUE: ("vue@latest", 6),
    ProjectType.NUXT: ("nuxt@latest", 5),
}


def create_script(project_type: ProjectType) -> str:
    """`npm create` with its prompts fed blank lines through a heredoc."""
    package, prompts = CREATE_PACKAGES[project_type]
    return f"npm create {package} . <<EOF\n" + "\n" * prompts + "EOF"


def create_project(project: ProjectConfig, compose: ComposeProject, ask: Ask) -> None:
    label = project.project_type.value.capitalize()
    console.print(f"Creating new {label} project...")
    compose.exec(create_script(project.project_type))

    console.print(f"\n[green]{label} project created successfully![/green]")
    console.print("Next steps:")
    console.print(f"1. Install dependencies: docker compose exec {config.APP_SERVICE} npm install")
    console.print(f"2. Start development server: docker compose exec {config.APP_SERVICE} npm run dev")
