"""Actionable error catalog for mageboot."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "database_unreachable": {
        "what": "Database host `{host}` did not accept connections after {attempts} attempts.",
        "next": "Check that the MySQL container is running and reachable as `{host}`.",
    },
    "database_probe_failed": {
        "what": "Database host `{host}` rejected the connection: {reason}",
        "next": "Verify MYSQL_USER and MYSQL_PASSWORD (or MYSQL_ROOT_PASSWORD).",
    },
    "missing_base_url": {
        "what": "No base URL configured for the installer.",
        "next": "Set MAGENTO_BASE_URL, e.g. `http://localhost/`.",
    },
    "install_failed": {
        "what": "The installer exited with status {returncode}.",
        "next": "Inspect the installer output above, drop database `{database}` and restart the container.",
    },
    "configure_failed": {
        "what": "Post-install command `{command}` exited with status {returncode}.",
        "next": "Run the command manually inside the container to see the full error.",
    },
    "sample_data_import_failed": {
        "what": "Importing `{path}` into `{database}` failed with status {returncode}.",
        "next": "The SQL file was kept for inspection. Drop database `{database}` before retrying.",
    },
}


def actionable_error(code: str, **kwargs: object) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
