"""Constants shared across mageboot."""

EXIT_SUCCESS = 0
EXIT_DATABASE_UNREACHABLE = 1
EXIT_SETUP_FAILED = 666

PROBE_MAX_ATTEMPTS = 10
PROBE_INITIAL_DELAY = 1.0

# mysql client error codes that mean "server not reachable (yet)"
CONNECTION_ERROR_CODES = frozenset({"2002", "2003", "2005", "2006", "2013"})

DEFAULT_DATABASE_HOST = "mysql"
DEFAULT_DATABASE_USER = "root"
DEFAULT_MAGENTO_VERSION = "latest"
DATABASE_NAME_PREFIX = "magento_"
DEFAULT_INSTALLATION_FOLDER = "/var/www/htdocs"
DEFAULT_FILESYSTEM_OWNER = "www-data"
DEFAULT_FILESYSTEM_GROUP = "www-data"
SAMPLE_DATA_FOLDER_NAME = "_magento_sample_data"
SAMPLE_DATA_SUFFIX = ".tar.gz"
SQL_SUFFIX = ".sql"

DEFAULT_INSTALLER_COMMAND = "n98-magerun"
DEFAULT_MYSQL_COMMAND = "mysql"
DEFAULT_CONFIG_FILE = ".mageboot.yml"

POST_INSTALL_COMMANDS = (("cache:disable",),)

ENV_DATABASE_HOST = "MYSQL_HOST"
ENV_DATABASE_NAME = "MYSQL_DATABASE"
ENV_MAGENTO_VERSION = "MAGENTO_VERSION"
ENV_DATABASE_USER = "MYSQL_USER"
ENV_DATABASE_PASSWORD = "MYSQL_PASSWORD"
ENV_DATABASE_ROOT_PASSWORD = "MYSQL_ROOT_PASSWORD"
ENV_BASE_URL = "MAGENTO_BASE_URL"
ENV_INSTALLATION_FOLDER = "MAGENTO_INSTALLATION_FOLDER"
ENV_FILESYSTEM_OWNER = "MAGENTO_FILESYSTEM_OWNER"
ENV_FILESYSTEM_GROUP = "MAGENTO_FILESYSTEM_GROUP"
ENV_DELETE_SAMPLE_DATA = "MAGENTO_DELETE_SAMPLE_DATA"
ENV_INSTALLER_COMMAND = "MAGERUN_COMMAND"
ENV_HOME = "HOME"
ENV_CONFIG_FILE = "MAGEBOOT_CONFIG"
