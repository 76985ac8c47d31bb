import logging

import config
from provisioner.errors import PortConflictError
from provisioner.models import PROJECT_NAME_PATTERN, ProjectConfig, ProjectType, ServicePorts
from provisioner.port_manager import PortProbe, is_port_open
from wizard.questions import Ask, Answers, ChoiceQuestion, PauseQuestion, PortQuestion, Question, build_config

logger = logging.getLogger(__name__)

PHP_WARNINGS = {
    "8.1": [
        "Laravel 11+ requires PHP 8.2 or higher",
        "Laravel Breeze 2+ requires PHP 8.2 or higher",
        "Some packages may require PHP 8.2",
    ],
    "7.4": [
        "Laravel 9+ requires PHP 8.0 or higher",
        "Laravel 8.x will be used",
        "Many packages may have compatibility issues",
    ],
    "7.3": [
        "Laravel 8+ requires PHP 7.4 or higher",
        "Laravel 7.x will be used",
        "Many packages may have compatibility issues",
    ],
}


def php_compatibility_notice(version: str) -> str:
    """Warning lines for PHP versions Laravel does not fully support. Empty for 8.2 / 8.3."""
    lines = ["\nChecking PHP version compatibility..."]
    if version in PHP_WARNINGS:
        lines.append(f"Warning: PHP {version}")
        lines += [f"   - {reason}" for reason in PHP_WARNINGS[version]]
    elif version not in ("8.2", "8.3"):
        lines.append(f"Warning: PHP version {version} might have compatibility issues with Laravel")
    return "\n".join(lines)


def _is_laravel(answers: Answers) -> bool:
    return answers.get("project_type") == ProjectType.LARAVEL


def environment_questions(probe: PortProbe = is_port_open) -> list[Question]:
    php_preferred, php_min, php_max = config.PHP_PORT
    mysql_preferred, mysql_min, mysql_max = config.MYSQL_PORT
    redis_preferred, redis_min, redis_max = config.REDIS_PORT
    nginx_preferred, nginx_min, nginx_max = config.NGINX_PORT

    return [
        ChoiceQuestion(
            key="project_type",
            title="Select project type:",
            prompt="Select project type (1-3): ",
            options=[("Laravel", ProjectType.LARAVEL), ("Vue", ProjectType.VUE), ("Nuxt", ProjectType.NUXT)],
            error="Please enter a number between 1 and 3",
        ),
        Question(
            key="name",
            prompt="\nEnter your project name (lowercase, no spaces): ",
            pattern=PROJECT_NAME_PATTERN,
            error="Project name must be lowercase, and can only contain letters, numbers, and hyphens",
        ),
        ChoiceQuestion(
            key="php_version",
            title="Available PHP versions:",
            prompt=f"Select PHP version (1-{len(config.PHP_VERSIONS)}): ",
            options=[(f"PHP {v}", v) for v in config.PHP_VERSIONS],
            error=f"Please enter a number between 1 and {len(config.PHP_VERSIONS)}",
            when=_is_laravel,
        ),
        PauseQuestion(
            key="php_acknowledged",
            prompt="\nPress Enter to continue or Ctrl+C to abort",
            notice=lambda answers: php_compatibility_notice(answers["php_version"]),
            when=_is_laravel,
        ),
        PortQuestion(key="php", label="PHP", preferred=php_preferred,
                     range_min=php_min, range_max=php_max, probe=probe),
        PortQuestion(key="mysql", label="MySQL", preferred=mysql_preferred,
                     range_min=mysql_min, range_max=mysql_max, probe=probe),
        PortQuestion(
            key="mysql_test",
            label="MySQL Test",
            preferred=lambda answers: answers["mysql"] + 1,
            range_min=lambda answers: answers["mysql"] + 1,
            range_max=config.MYSQL_TEST_RANGE_MAX,
            probe=probe,
        ),
        PortQuestion(key="redis", label="Redis", preferred=redis_preferred,
                     range_min=redis_min, range_max=redis_max, probe=probe),
        PortQuestion(key="nginx", label="Nginx", preferred=nginx_preferred,
                     range_min=nginx_min, range_max=nginx_max, probe=probe),
    ]


def collect_environment(ask: Ask, probe: PortProbe = is_port_open) -> ProjectConfig:
    """Run the environment questions and build the ProjectConfig."""
    answers = build_config(environment_questions(probe), ask)

    if answers["mysql_test"] == answers["mysql"]:
        raise PortConflictError("Test database port must be different from primary database port")

    project = ProjectConfig(
        name=answers["name"],
        project_type=answers["project_type"],
        php_version=answers.get("php_version", config.DEFAULT_PHP_VERSION),
        ports=ServicePorts(
            php=answers["php"],
            mysql=answers["mysql"],
            mysql_test=answers["mysql_test"],
            redis=answers["redis"],
            nginx=answers["nginx"],
        ),
    )
    logger.debug("collected %s", project)
    return project
