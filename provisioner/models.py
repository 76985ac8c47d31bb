from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

import config

PROJECT_NAME_PATTERN = r"^[a-z0-9-]+$"


class ProjectType(str, Enum):
    LARAVEL = "laravel"
    VUE = "vue"
    NUXT = "nuxt"


class PortRequest(BaseModel, frozen=True):
    """A service asking for a host port. preferred is expected (not required) to lie in range."""
    name: str
    preferred: int
    range_min: int
    range_max: int


class PortResolution(BaseModel, frozen=True):
    request: PortRequest
    resolved_port: int
    used_fallback: bool = False


class ServicePorts(BaseModel, frozen=True):
    php: int
    mysql: int
    mysql_test: int
    redis: int
    nginx: int


class ProjectConfig(BaseModel, frozen=True):
    """Everything the wizard collected, the input to the renderer and the compose driver."""
    name: str = Field(pattern=PROJECT_NAME_PATTERN)
    project_type: ProjectType
    php_version: str = config.DEFAULT_PHP_VERSION
    ports: ServicePorts

    @property
    def app_url(self) -> str:
        return f"http://localhost:{self.ports.nginx}"

    @property
    def database(self) -> str:
        return f"{self.name}_db"

    @property
    def db_user(self) -> str:
        return f"{self.name}_user"


class AuthKind(str, Enum):
    NONE = "none"
    BREEZE = "breeze"
    JETSTREAM = "jetstream"


class TestFramework(str, Enum):
    __test__ = False  # not a pytest class

    PHPUNIT = "phpunit"
    PEST = "pest"


class LaravelOptions(BaseModel, frozen=True):
    auth: AuthKind = AuthKind.NONE
    breeze_stack: Optional[str] = None  # blade | livewire | react | vue | api
    dark_mode: bool = False
    jetstream_stack: Optional[str] = None  # livewire | inertia
    teams: bool = False
    testing: TestFramework = TestFramework.PHPUNIT
