import logging
import shutil
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

import config
from provisioner.models import ProjectConfig

logger = logging.getLogger(__name__)

# Jinja2 setup, load templates from the templates directory
TEMPLATE_DIR = Path(__file__).parent / "templates"
jinja_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    keep_trailing_newline=True,
    undefined=StrictUndefined,
)

DOCKERFILE_PATH = Path("docker/php/Dockerfile")
NGINX_CONF_PATH = Path("docker/nginx/default.conf")
ENV_SETUP_PATH = Path(".env.setup")
ENV_PATH = Path(".env")
COMPOSE_PATH = Path("docker-compose.yml")


def render_environment(project: ProjectConfig) -> dict[Path, str]:
    """Render every generated file for `project`, keyed by path relative to the project root."""
    dockerfile = jinja_env.get_template("Dockerfile.j2").render(
        php_version=project.php_version,
        user="dev",
        uid=1000,
    )
    nginx_conf = jinja_env.get_template("nginx.conf.j2").render(app_service=config.APP_SERVICE)
    env_setup = jinja_env.get_template("env.setup.j2").render(
        project=project,
        db_password=config.DB_PASSWORD,
    )
    compose = jinja_env.get_template("docker-compose.yml.j2").render(app_service=config.APP_SERVICE)

    return {
        DOCKERFILE_PATH: dockerfile,
        NGINX_CONF_PATH: nginx_conf,
        ENV_SETUP_PATH: env_setup,
        COMPOSE_PATH: compose,
    }


def write_environment(project: ProjectConfig, root: Path) -> list[Path]:
    """Write the rendered files under root and copy .env.setup to .env.

    An existing docker-compose.yml is left alone. Returns the paths written.
    """
    root = Path(root)
    written = []
    for relative, content in render_environment(project).items():
        target = root / relative
        if relative == COMPOSE_PATH and target.exists():
            logger.info("keeping existing %s", target)
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
        written.append(target)

    shutil.copyfile(root / ENV_SETUP_PATH, root / ENV_PATH)
    written.append(root / ENV_PATH)
    logger.debug(".env.setup content:\n%s", (root / ENV_SETUP_PATH).read_text())
    return written
