"""Configuration file loader for mageboot."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from mageboot.errors import BootstrapError


class ConfigLoader:
    """Loads YAML configuration files that provide defaults for the environment."""

    SUPPORTED_KEYS = {
        "database_host",
        "database_name",
        "database_user",
        "database_password",
        "magento_version",
        "base_url",
        "installation_folder",
        "filesystem_owner",
        "filesystem_group",
        "sample_data_folder",
        "delete_sample_data_after_install",
        "probe_max_attempts",
        "probe_initial_delay",
        "installer_command",
        "mysql_command",
        "verbose",
        "log_file",
        "manifest_file",
        "dry_run",
    }

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise BootstrapError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise BootstrapError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise BootstrapError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            unknown_list = ", ".join(unknown)
            raise BootstrapError(f"Unknown configuration keys: {unknown_list}")

        return parsed
