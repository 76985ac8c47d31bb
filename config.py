import os

# Logging / output
LOG_LEVEL = os.environ.get("STACKUP_LOG_LEVEL", "WARNING").upper()
SHOW_ENV = os.environ.get("STACKUP_SHOW_ENV", "") not in ("", "0", "false")

# Port probing
PORT_PROBE_HOST = os.environ.get("STACKUP_PROBE_HOST", "localhost")
PORT_PROBE_TIMEOUT = float(os.environ.get("STACKUP_PROBE_TIMEOUT", "0.5"))  # seconds

# Port defaults: (preferred, range_min, range_max)
PHP_PORT = (9000, 9000, 9100)
MYSQL_PORT = (3306, 3306, 3399)
MYSQL_TEST_RANGE_MAX = 3399  # test db scans from mysql + 1 up to this
REDIS_PORT = (6379, 6379, 6400)
NGINX_PORT = (8080, 8080, 8100)

# PHP
PHP_VERSIONS = ["7.3", "7.4", "8.1", "8.2", "8.3"]
DEFAULT_PHP_VERSION = "8.2"  # used for Vue / Nuxt

# Docker compose
APP_SERVICE = "app"
DB_PASSWORD = os.environ.get("STACKUP_DB_PASSWORD", "secret")

# Readiness
CONTAINER_READY_ATTEMPTS = 30
CONTAINER_READY_INTERVAL = 2.0  # seconds between checks
WEB_READY_ATTEMPTS = 10
WEB_READY_INTERVAL = 1.0
