import logging
import os

import click
from rich.logging import RichHandler

from .constants import DEFAULT_CONFIG_FILE, ENV_CONFIG_FILE
from .core import MagentoBootstrapper
from .errors import BootstrapError
from .services.config_loader import ConfigLoader
from .services.environment import EnvironmentService


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


@click.command(
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False}
)
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    envvar=ENV_CONFIG_FILE,
    help="Path to a YAML configuration file. Defaults to .mageboot.yml if present.",
)
@click.option("--verbose", is_flag=True, default=None, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
@click.option(
    "--manifest-file",
    type=click.Path(),
    help="Write a JSON run manifest with per-step status to this path.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=None,
    help="Print the resolved configuration and plan without touching the database or files.",
)
@click.argument("command", nargs=-1, type=click.UNPROCESSED)
def main(config, verbose, log_file, manifest_file, dry_run, command):
    """Prepare a Magento container on first boot, then run COMMAND."""
    logger = logging.getLogger("mageboot")

    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), DEFAULT_CONFIG_FILE)
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
    except BootstrapError as exc:
        raise click.ClickException(str(exc)) from exc

    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))
    log_file = _resolve_option(log_file, config_values, "log_file")
    manifest_file = _resolve_option(manifest_file, config_values, "manifest_file")
    dry_run = bool(_resolve_option(dry_run, config_values, "dry_run", default=False))

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    try:
        installer_config = EnvironmentService(os.environ, config_values).build()
        bootstrapper = MagentoBootstrapper(
            config=installer_config,
            command=command,
            dry_run=dry_run,
            manifest_file=manifest_file,
        )
        exit_code = bootstrapper.run()
    except BootstrapError as exc:
        raise click.ClickException(str(exc)) from exc

    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
