"""Builds the installer configuration from the container environment."""

import os
from typing import Any, Mapping, Optional

from mageboot import constants
from mageboot.errors import BootstrapError
from mageboot.models import InstallerConfig

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def parse_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise BootstrapError(f"{name} must be a boolean (true/false), got '{value}'.")


def derive_database_name(version: str) -> str:
    return constants.DATABASE_NAME_PREFIX + version.replace(".", "_")


class EnvironmentService:
    """Resolves each setting from environment, then config file, then default."""

    def __init__(self, environ: Mapping[str, str], file_values: Optional[Mapping[str, Any]] = None):
        self.environ = environ
        self.file_values = file_values or {}

    def _get(self, env_name: Optional[str], key: str, default: Any = None) -> Any:
        if env_name:
            value = self.environ.get(env_name)
            if value:
                return value
        value = self.file_values.get(key)
        if value is not None and value != "":
            return value
        return default

    def _resolve_database_name(self) -> str:
        explicit = self._get(constants.ENV_DATABASE_NAME, "database_name")
        if explicit:
            return str(explicit)
        version = self._get(
            constants.ENV_MAGENTO_VERSION,
            "magento_version",
            constants.DEFAULT_MAGENTO_VERSION,
        )
        return derive_database_name(str(version))

    def _resolve_password(self) -> str:
        for env_name in (constants.ENV_DATABASE_PASSWORD, constants.ENV_DATABASE_ROOT_PASSWORD):
            value = self.environ.get(env_name)
            if value:
                return value
        return str(self._get(None, "database_password", ""))

    def _resolve_sample_data_folder(self) -> str:
        configured = self.file_values.get("sample_data_folder")
        if configured:
            return str(configured)
        home = self.environ.get(constants.ENV_HOME) or os.path.expanduser("~")
        return os.path.join(home, constants.SAMPLE_DATA_FOLDER_NAME)

    def build(self) -> InstallerConfig:
        try:
            probe_max_attempts = int(
                self._get(None, "probe_max_attempts", constants.PROBE_MAX_ATTEMPTS)
            )
            probe_initial_delay = float(
                self._get(None, "probe_initial_delay", constants.PROBE_INITIAL_DELAY)
            )
        except (TypeError, ValueError) as exc:
            raise BootstrapError(f"Invalid probe settings in config file: {exc}") from exc

        if probe_max_attempts < 1:
            raise BootstrapError("probe_max_attempts must be at least 1.")

        base_url = self._get(constants.ENV_BASE_URL, "base_url")

        return InstallerConfig(
            database_host=str(
                self._get(constants.ENV_DATABASE_HOST, "database_host", constants.DEFAULT_DATABASE_HOST)
            ),
            database_name=self._resolve_database_name(),
            database_user=str(
                self._get(constants.ENV_DATABASE_USER, "database_user", constants.DEFAULT_DATABASE_USER)
            ),
            database_password=self._resolve_password(),
            base_url=str(base_url) if base_url else None,
            installation_folder=str(
                self._get(
                    constants.ENV_INSTALLATION_FOLDER,
                    "installation_folder",
                    constants.DEFAULT_INSTALLATION_FOLDER,
                )
            ),
            filesystem_owner=str(
                self._get(
                    constants.ENV_FILESYSTEM_OWNER,
                    "filesystem_owner",
                    constants.DEFAULT_FILESYSTEM_OWNER,
                )
            ),
            filesystem_group=str(
                self._get(
                    constants.ENV_FILESYSTEM_GROUP,
                    "filesystem_group",
                    constants.DEFAULT_FILESYSTEM_GROUP,
                )
            ),
            sample_data_folder=self._resolve_sample_data_folder(),
            delete_sample_data_after_install=parse_bool(
                self._get(
                    constants.ENV_DELETE_SAMPLE_DATA,
                    "delete_sample_data_after_install",
                    True,
                ),
                "delete_sample_data_after_install",
            ),
            probe_max_attempts=probe_max_attempts,
            probe_initial_delay=probe_initial_delay,
            installer_command=str(
                self._get(
                    constants.ENV_INSTALLER_COMMAND,
                    "installer_command",
                    constants.DEFAULT_INSTALLER_COMMAND,
                )
            ),
            mysql_command=str(self._get(None, "mysql_command", constants.DEFAULT_MYSQL_COMMAND)),
        )
