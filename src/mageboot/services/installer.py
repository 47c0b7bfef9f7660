"""n98-magerun installer services for mageboot."""

from typing import Sequence, Tuple

from mageboot.constants import POST_INSTALL_COMMANDS
from mageboot.errors import BootstrapError, CommandFailedError
from mageboot.errors_catalog import actionable_error
from mageboot.models import Flag, InstallerConfig, Invocation, KeyValue, Positional, arguments_from_mapping


class InstallerService:
    """Drives the non-interactive install and the post-install maintenance commands."""

    def __init__(
        self,
        logger,
        console,
        run_cmd,
        post_install_commands: Sequence[Tuple[str, ...]] = POST_INSTALL_COMMANDS,
    ):
        self.logger = logger
        self.console = console
        self.run_cmd = run_cmd
        self.post_install_commands = post_install_commands

    def install_invocation(self, config: InstallerConfig) -> Invocation:
        if not config.base_url:
            raise BootstrapError(actionable_error("missing_base_url"))

        options = {
            0: "install",
            "dbHost": config.database_host,
            "dbUser": config.database_user,
            "dbPass": config.database_password,
            "dbName": config.database_name,
            "installSampleData": "no",
            "useDefaultConfigParams": "yes",
            "installationFolder": config.installation_folder,
            "baseUrl": config.base_url,
            "noDownload": True,
            "forceUseDb": True,
            1: "-vvv",
        }
        return Invocation(
            program=config.installer_command,
            arguments=tuple(arguments_from_mapping(options, secret_keys=("dbPass",))),
        )

    def _tool(self, config: InstallerConfig, *command: str, flags: Sequence[str] = ()) -> Invocation:
        arguments = [KeyValue("root-dir", config.installation_folder)]
        arguments.extend(Positional(part) for part in command)
        arguments.extend(Flag(flag) for flag in flags)
        return Invocation(program=config.installer_command, arguments=tuple(arguments))

    def install(self, config: InstallerConfig):
        self.console.print("[blue]Installing Magento...[/blue]")
        invocation = self.install_invocation(config)

        try:
            self.run_cmd(invocation, check=True)
        except CommandFailedError as exc:
            raise BootstrapError(
                actionable_error(
                    "install_failed",
                    returncode=exc.returncode,
                    database=config.database_name,
                )
            ) from exc

        self.console.print("[green]Magento installed.[/green]")
        self.enable_symlinks(config)

    def enable_symlinks(self, config: InstallerConfig) -> bool:
        result = self.run_cmd(
            self._tool(config, "dev:symlinks", flags=("on", "global")),
            check=False,
        )
        if result.returncode != 0:
            self.console.print("[yellow]Could not enable template symlinks, continuing.[/yellow]")
            self.logger.warning("Enabling symlinks failed with status %s.", result.returncode)
            return False
        return True

    def configure(self, config: InstallerConfig):
        self.console.print("[blue]Running post-install configuration...[/blue]")
        for command in self.post_install_commands:
            result = self.run_cmd(self._tool(config, *command), check=False)
            if result.returncode != 0:
                raise BootstrapError(
                    actionable_error(
                        "configure_failed",
                        command=" ".join(command),
                        returncode=result.returncode,
                    )
                )
        self.console.print("[green]Post-install configuration done.[/green]")
