"""Create a Laravel application inside the app container and install the chosen starter kits."""
import logging
import re
from pathlib import Path

from dotenv import dotenv_values, set_key
from rich.console import Console

from provisioner.compose import ComposeProject
from provisioner.models import AuthKind, LaravelOptions, ProjectConfig, TestFramework
from provisioner.renderer import ENV_PATH, ENV_SETUP_PATH
from wizard.questions import Answers, Ask, ChoiceQuestion, ConfirmQuestion, Question, build_config

logger = logging.getLogger(__name__)
console = Console()

LOGS_HINT = "Please check docker logs: docker compose logs app"
GITIGNORE_ENTRIES = "\n# Custom entries\ndocker/\n.env.setup"
COMMENTED_KEY = re.compile(r"#[ \t]*([A-Za-z_][A-Za-z0-9_]*)=")

BREEZE_STACKS = [
    ("Blade with Alpine.js", "blade"),
    ("Livewire (Blade + Alpine.js + Livewire)", "livewire"),
    ("React with Inertia", "react"),
    ("Vue with Inertia", "vue"),
    ("API only", "api"),
]
JETSTREAM_STACKS = [("Livewire + Blade", "livewire"), ("Inertia + Vue.js", "inertia")]


def detect_php_major(php_v_output: str) -> int:
    """Major version from `php -v` output. Defaults to 7 when the banner is missing."""
    match = re.search(r"^PHP\s+([0-9]+\.[0-9]+)", php_v_output, re.MULTILINE)
    version = match.group(1) if match else "7.0"
    return int(version.split(".")[0])


def dark_mode_skipped(answers: Answers) -> str:
    if answers.get("auth") == AuthKind.BREEZE and answers["php_major"] < 8:
        return f"Skipping dark mode installation (requires PHP >= 8.0, detected {answers['php_major']})"
    return ""


def option_questions() -> list[Question]:
    def uses(kind: AuthKind):
        return lambda answers: answers.get("auth") == kind

    return [
        ChoiceQuestion(
            key="auth",
            title="Select authentication setup:",
            prompt="Choose authentication (1-3): ",
            options=[
                ("No authentication (skip)", AuthKind.NONE),
                ("Laravel Breeze (minimal)", AuthKind.BREEZE),
                ("Laravel Jetstream", AuthKind.JETSTREAM),
            ],
            error="Please enter a number between 1 and 3",
        ),
        ChoiceQuestion(
            key="breeze_stack",
            title="Select Breeze stack:",
            prompt="Choose stack (1-5): ",
            options=BREEZE_STACKS,
            error="Please enter a number between 1 and 5",
            when=uses(AuthKind.BREEZE),
        ),
        ConfirmQuestion(
            key="dark_mode",
            prompt="Would you like to include dark mode support? [y/n]: ",
            when=lambda answers: answers.get("auth") == AuthKind.BREEZE and answers["php_major"] >= 8,
        ),
        ChoiceQuestion(
            key="jetstream_stack",
            title="Select Jetstream stack:",
            prompt="Choose stack (1-2): ",
            options=JETSTREAM_STACKS,
            error="Please enter 1 or 2",
            when=uses(AuthKind.JETSTREAM),
        ),
        ConfirmQuestion(
            key="teams",
            prompt="Would you like to include team support? [y/n]: ",
            when=uses(AuthKind.JETSTREAM),
        ),
        ChoiceQuestion(
            key="testing",
            title="Select testing framework:",
            prompt="Choose testing framework (1-2): ",
            options=[("PHPUnit (default)", TestFramework.PHPUNIT), ("Pest (recommended)", TestFramework.PEST)],
            error="Please enter 1 or 2",
            notice=dark_mode_skipped,
        ),
    ]


def collect_options(ask: Ask, php_major: int) -> LaravelOptions:
    answers: Answers = build_config(option_questions(), ask, initial={"php_major": php_major})
    answers.pop("php_major")
    return LaravelOptions(**answers)


def install_commands(options: LaravelOptions) -> list[str]:
    """Shell scripts to run in the app container, in order, for the chosen options."""
    commands = []
    if options.auth == AuthKind.BREEZE:
        commands.append("composer require laravel/breeze --dev")
        install = f"php artisan breeze:install {options.breeze_stack}"
        if options.dark_mode:
            install += " --dark"
        commands.append(install)
        if options.breeze_stack != "api":
            commands.append("npm install && npm run build")
    elif options.auth == AuthKind.JETSTREAM:
        commands.append("composer require laravel/jetstream")
        install = f"php artisan jetstream:install {options.jetstream_stack}"
        if options.teams:
            install += " --teams"
        commands.append(install)
        commands.append("npm install && npm run build")

    if options.testing == TestFramework.PEST:
        commands.append(
            "composer require pestphp/pest --dev --with-all-dependencies && php artisan pest:install"
        )
    return commands


def enable_commented_keys(env_path: Path, keys) -> None:
    """Turn `# KEY=...` lines back into `KEY=...` for keys not set yet, so set_key updates them in place."""
    pending = set(keys) - set(dotenv_values(env_path))
    lines = env_path.read_text().splitlines(keepends=True)
    for i, line in enumerate(lines):
        match = COMMENTED_KEY.match(line)
        if match and match.group(1) in pending:
            lines[i] = line[match.start(1):]
            pending.discard(match.group(1))
    env_path.write_text("".join(lines))


def update_env_file(env_path: Path, values: dict[str, str]) -> None:
    env_path.touch(exist_ok=True)
    enable_commented_keys(env_path, values)
    for key, value in values.items():
        set_key(env_path, key, value, quote_mode="never")


def configure_env(project: ProjectConfig, root: Path) -> None:
    """Fold the docker settings from .env.setup into Laravel's .env, keeping Laravel's own keys."""
    root = Path(root)
    values = {k: v for k, v in dotenv_values(root / ENV_SETUP_PATH).items() if v is not None}
    values.update({
        "APP_NAME": project.name,
        "APP_URL": project.app_url,
        "DB_PORT": str(project.ports.mysql),
        "DB_DATABASE": project.database,
        "DB_USERNAME": project.db_user,
        "REDIS_PORT": str(project.ports.redis),
    })
    update_env_file(root / ENV_PATH, values)


def append_gitignore(root: Path) -> None:
    with open(Path(root) / ".gitignore", "a") as f:
        f.write(GITIGNORE_ENTRIES)


def create_project(project: ProjectConfig, compose: ComposeProject, ask: Ask) -> LaravelOptions:
    """Scaffold Laravel into the project root via the app container, then apply the chosen options."""
    console.print("Creating new Laravel project...")
    compose.exec("composer create-project laravel/laravel temp --prefer-dist", hint=LOGS_HINT)
    console.print("Laravel app created in temp folder.")

    console.print("Moving Laravel app to root directory...")
    compose.exec("mv temp/* . 2>/dev/null || true")
    compose.exec("mv temp/.[!.]* . 2>/dev/null || true")
    compose.exec("rm -rf temp")
    console.print("Laravel app moved to root directory.")

    php_major = detect_php_major(compose.exec_output("php -v"))
    console.print("\n[bold]Laravel Project Setup Options:[/bold]")
    options = collect_options(ask, php_major)

    for command in install_commands(options):
        logger.info("installing: %s", command)
        compose.exec(command, hint=LOGS_HINT)

    append_gitignore(compose.root)
    console.print("Added custom entries to .gitignore")
    configure_env(project, compose.root)

    console.print("\n[green]Laravel project created and configured successfully![/green]")
    console.print("Environment configured with:")
    console.print(f"- App URL: {project.app_url}")
    console.print(f"- Database: {project.database}")
    console.print(f"- DB User: {project.db_user}")
    console.print(f"- Redis Port: {project.ports.redis}")
    return options
