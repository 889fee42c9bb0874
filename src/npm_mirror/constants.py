"""Constants used in the project."""


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration defaults; not intended to provide behavior.
    """

    REGISTRY_URL_NPM = "https://registry.npmjs.org/"
    PACKAGE_JSON_FILE = "package.json"
    NODE_MODULES_DIR = "node_modules"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_LEVEL_ENV = "NPM_MIRROR_LOG_LEVEL"
    CONFIG_ENV = "NPM_MIRROR_CONFIG"
    USER_AGENT = "npm-mirror-resolver/0.1"

    REQUEST_TIMEOUT = 30  # Timeout in seconds for a single registry request
    HTTP_RETRY_MAX = 3
    HTTP_RETRY_BASE_DELAY_SEC = 0.3
    MAX_CONCURRENCY = 16
    BATCH_TIMEOUT_SEC = None  # No overall deadline unless configured
