"""MySQL probe, provisioning and import services for mageboot."""

import logging
import re
import time
from typing import List, Optional

from mageboot.constants import CONNECTION_ERROR_CODES
from mageboot.errors import BootstrapError, DatabaseUnreachableError
from mageboot.errors_catalog import actionable_error
from mageboot.models import Flag, InstallerConfig, Invocation, KeyValue, Positional, ProvisionResult

_CLIENT_ERROR_RE = re.compile(r"ERROR\s+(\d+)")


class DatabaseService:
    """Talks to MySQL through its command-line client."""

    def __init__(self, logger, console, run_cmd, sleep=time.sleep):
        self.logger = logger
        self.console = console
        self.run_cmd = run_cmd
        self.sleep = sleep

    @staticmethod
    def _client_error_code(stderr_output: str) -> Optional[str]:
        match = _CLIENT_ERROR_RE.search(stderr_output or "")
        return match.group(1) if match else None

    def is_connection_error(self, stderr_output: str) -> bool:
        return self._client_error_code(stderr_output) in CONNECTION_ERROR_CODES

    def _client(
        self,
        config: InstallerConfig,
        statement: Optional[str] = None,
        database: Optional[str] = None,
        stdin_path: Optional[str] = None,
    ) -> Invocation:
        arguments = [
            KeyValue("host", config.database_host),
            KeyValue("user", config.database_user),
            Flag("batch"),
            Flag("skip-column-names"),
        ]
        if statement is not None:
            arguments.append(KeyValue("execute", statement))
        if database is not None:
            arguments.append(Positional(database))

        env = {"MYSQL_PWD": config.database_password} if config.database_password else {}
        return Invocation(
            program=config.mysql_command,
            arguments=tuple(arguments),
            stdin_path=stdin_path,
            env=env,
        )

    def wait_for_connection(self, config: InstallerConfig) -> int:
        """Probes the server until it accepts connections; returns the attempt count."""
        self.console.print(
            f"[yellow]Waiting for database at {config.database_host} to accept connections...[/yellow]"
        )
        probe = self._client(config, statement="SELECT 1")
        delay = config.probe_initial_delay
        last_error = ""

        for attempt in range(1, config.probe_max_attempts + 1):
            result = self.run_cmd(probe, check=False, capture_output=True, log_level=logging.DEBUG)
            if result.returncode == 0:
                self.console.print("[green]Database is ready.[/green]")
                self.logger.info("Database %s reachable after %s attempt(s).", config.database_host, attempt)
                return attempt

            stderr_output = (result.stderr or "").strip()
            if not self.is_connection_error(stderr_output):
                raise BootstrapError(
                    actionable_error(
                        "database_probe_failed",
                        host=config.database_host,
                        reason=stderr_output or f"exit status {result.returncode}",
                    )
                )

            last_error = stderr_output
            if attempt < config.probe_max_attempts:
                self.logger.warning(
                    "Database not reachable (attempt %s/%s), retrying in %.0fs: %s",
                    attempt,
                    config.probe_max_attempts,
                    delay,
                    stderr_output,
                )
                self.sleep(delay)
                delay *= 2

        if last_error:
            self.console.print(f"[red]{last_error}[/red]")
        raise DatabaseUnreachableError(
            actionable_error(
                "database_unreachable",
                host=config.database_host,
                attempts=config.probe_max_attempts,
            )
        )

    def list_databases(self, config: InstallerConfig) -> List[str]:
        result = self.run_cmd(
            self._client(config, statement="SHOW DATABASES"),
            check=True,
            capture_output=True,
            log_level=logging.DEBUG,
        )
        return [line.strip() for line in (result.stdout or "").splitlines() if line.strip()]

    def ensure_database(self, config: InstallerConfig) -> ProvisionResult:
        self.console.print(f"[blue]Checking for database {config.database_name}...[/blue]")

        if config.database_name in self.list_databases(config):
            self.console.print(f"[green]Database {config.database_name} already exists.[/green]")
            self.logger.info("Database %s already exists.", config.database_name)
            return ProvisionResult.EXISTED

        # database_name is trusted configuration, only backtick-quoted here
        statement = f"CREATE DATABASE `{config.database_name}`"
        self.run_cmd(self._client(config, statement=statement), check=True, capture_output=True)
        self.console.print(f"[green]Database {config.database_name} created.[/green]")
        self.logger.info("Database %s created.", config.database_name)
        return ProvisionResult.CREATED

    def import_sql_file(self, config: InstallerConfig, sql_path: str):
        self.logger.info("Importing %s into %s...", sql_path, config.database_name)
        result = self.run_cmd(
            self._client(config, database=config.database_name, stdin_path=sql_path),
            check=False,
            capture_output=True,
        )
        if result.returncode != 0:
            stderr_output = (result.stderr or "").strip()
            if stderr_output:
                self.console.print(f"[red]{stderr_output}[/red]")
            raise BootstrapError(
                actionable_error(
                    "sample_data_import_failed",
                    path=sql_path,
                    database=config.database_name,
                    returncode=result.returncode,
                )
            )
