import logging
import shlex
import subprocess
import uuid
from typing import Optional, Sequence

from rich.console import Console

from .constants import EXIT_DATABASE_UNREACHABLE, EXIT_SETUP_FAILED, EXIT_SUCCESS
from .errors import BootstrapError, DatabaseUnreachableError
from .models import InstallerConfig, Invocation, Positional, ProvisionResult
from .services.archive import ArchiveService
from .services.command_runner import CommandRunner
from .services.database import DatabaseService
from .services.filesystem import FileSystemService
from .services.installer import InstallerService
from .services.manifest import ManifestService
from .services.sample_data import SampleDataService

console = Console()
logger = logging.getLogger("mageboot")


class MagentoBootstrapper:
    """Runs the first-boot sequence and hands over to the container command."""

    SHELL = "/bin/sh"

    def __init__(
        self,
        config: InstallerConfig,
        command: Sequence[str] = (),
        dry_run: bool = False,
        manifest_file: Optional[str] = None,
    ):
        self.config = config
        self.command = list(command)
        self.dry_run = dry_run
        self.run_id = uuid.uuid4().hex[:10]
        self.current_step_name: Optional[str] = None

        self.command_runner = CommandRunner(logger=logger)
        self.manifest_service = ManifestService(manifest_file=manifest_file, logger=logger)
        self.filesystem_service = FileSystemService(logger=logger, console=console)
        self.archive_service = ArchiveService()
        self.database_service = DatabaseService(logger=logger, console=console, run_cmd=self._run_cmd)
        self.sample_data_service = SampleDataService(
            logger=logger,
            console=console,
            archive_service=self.archive_service,
            filesystem_service=self.filesystem_service,
            database_service=self.database_service,
        )
        self.installer_service = InstallerService(logger=logger, console=console, run_cmd=self._run_cmd)

    def _run_cmd(self, invocation: Invocation, check: bool = True, **kwargs) -> subprocess.CompletedProcess:
        return self.command_runner.run(invocation, check=check, **kwargs)

    def _run_step(self, name: str, callback, *args, **kwargs):
        self.manifest_service.step_started(name)
        self.current_step_name = name

        try:
            result = callback(*args, **kwargs)
        except Exception as exc:
            self.manifest_service.step_finished(name, "failed", error=str(exc))
            raise

        self.manifest_service.step_finished(name, "success")
        self.current_step_name = None
        return result

    def wait_for_database(self) -> int:
        return self.database_service.wait_for_connection(self.config)

    def provision_database(self) -> ProvisionResult:
        return self.database_service.ensure_database(self.config)

    def load_sample_data(self) -> bool:
        return self.sample_data_service.load(self.config)

    def install(self):
        self.installer_service.install(self.config)

    def configure(self):
        self.installer_service.configure(self.config)

    def setup(self):
        """Brings the shop to an installed state; raises on failure."""
        self._run_step("wait_for_database", self.wait_for_database)
        provision_result = self._run_step("provision_database", self.provision_database)

        if provision_result is ProvisionResult.EXISTED:
            console.print("[green]Existing installation detected, skipping setup.[/green]")
            logger.info("Database %s exists; treating installation as complete.", self.config.database_name)
            for step_name in ("load_sample_data", "install", "configure"):
                self.manifest_service.step_skipped(step_name, "database already existed")
            return

        self._run_step("load_sample_data", self.load_sample_data)
        self._run_step("install", self.install)
        self._run_step("configure", self.configure)

    def dispatch(self) -> int:
        if not self.command:
            logger.info("No command given, exiting.")
            return EXIT_SUCCESS

        shell_command = shlex.join(self.command)
        console.print(f"[blue]Starting: {shell_command}[/blue]")
        result = self._run_cmd(
            Invocation(program=self.SHELL, arguments=(Positional("-c"), Positional(shell_command))),
            check=False,
        )
        return result.returncode

    def print_plan(self):
        console.print("[bold blue]Dry run: no changes will be made.[/bold blue]")
        for key, value in self.config.masked().items():
            console.print(f"  {key}: {value}")
        steps = [
            f"wait for {self.config.database_host} (up to {self.config.probe_max_attempts} attempts)",
            f"create database {self.config.database_name} if missing",
            f"import sample data from {self.config.sample_data_folder}",
            f"install into {self.config.installation_folder}",
            "run post-install configuration",
            f"run: {shlex.join(self.command)}" if self.command else "exit",
        ]
        for index, step in enumerate(steps, start=1):
            console.print(f"  {index}. {step}")

    def run(self) -> int:
        if self.dry_run:
            self.print_plan()
            return EXIT_SUCCESS

        logger.info("Starting mageboot run %s...", self.run_id)
        self.manifest_service.start_run(run_id=self.run_id, config=self.config.masked())

        try:
            self.setup()
        except DatabaseUnreachableError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            logger.error(str(exc))
            self.manifest_service.finalize("failed", EXIT_DATABASE_UNREACHABLE, error=str(exc))
            return EXIT_DATABASE_UNREACHABLE
        except BootstrapError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            logger.error(str(exc))
            self.manifest_service.finalize("failed", EXIT_SETUP_FAILED, error=str(exc))
            return EXIT_SETUP_FAILED
        except KeyboardInterrupt:
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            if self.current_step_name:
                self.manifest_service.step_finished(self.current_step_name, "aborted")
            self.manifest_service.finalize("aborted", EXIT_SETUP_FAILED, error="Operation cancelled by user.")
            return EXIT_SETUP_FAILED
        except Exception as exc:
            console.print(f"[bold red]Unexpected error:[/bold red] {exc}")
            logger.exception("Unexpected error during %s", self.current_step_name or "setup")
            self.manifest_service.finalize("failed", EXIT_SETUP_FAILED, error=str(exc))
            return EXIT_SETUP_FAILED

        console.print("[bold green]Setup complete.[/bold green]")
        exit_code = self._run_step("dispatch", self.dispatch)
        self.manifest_service.finalize("success", exit_code)
        return exit_code
