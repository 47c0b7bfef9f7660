"""Subprocess execution service for mageboot."""

import logging
import os
import shlex
import subprocess

from mageboot.errors import BootstrapError, CommandFailedError
from mageboot.models import Invocation


class CommandRunner:
    """Runs external commands with consistent logging and error handling."""

    def __init__(self, logger):
        self.logger = logger

    @staticmethod
    def describe(invocation: Invocation) -> str:
        cmd_str = shlex.join(invocation.argv(mask_secrets=True))
        if invocation.stdin_path:
            cmd_str = f"{cmd_str} < {shlex.quote(invocation.stdin_path)}"
        return cmd_str

    def run(
        self,
        invocation: Invocation,
        check: bool = True,
        capture_output: bool = False,
        log_level: int = logging.INFO,
    ) -> subprocess.CompletedProcess:
        cmd = invocation.argv()
        cmd_str = self.describe(invocation)
        self.logger.log(log_level, "Executing: %s", cmd_str)

        env = None
        if invocation.env:
            env = dict(os.environ)
            env.update(invocation.env)

        try:
            if invocation.stdin_path:
                with open(invocation.stdin_path, "rb") as stdin:
                    result = self._execute(cmd, stdin, capture_output, env)
            else:
                result = self._execute(cmd, None, capture_output, env)
        except FileNotFoundError as exc:
            if exc.filename == invocation.stdin_path:
                raise BootstrapError(f"Input file not found: {invocation.stdin_path}") from exc
            raise BootstrapError(
                f"Required command not found: {cmd[0]}. Please install it and try again."
            ) from exc
        except OSError as exc:
            raise BootstrapError(f"Failed to execute command: {cmd_str}. {exc}") from exc

        if capture_output and result.stdout:
            self.logger.debug("Command output: %s", result.stdout.strip())

        if result.returncode == 0:
            return result

        stderr = (result.stderr or "").strip() if capture_output else ""
        message = f"Command failed ({result.returncode}): {cmd_str}"
        if stderr:
            message = f"{message}\n{stderr}"

        if check:
            raise CommandFailedError(message, result.returncode)

        self.logger.debug(message)
        return result

    @staticmethod
    def _execute(cmd, stdin, capture_output, env) -> subprocess.CompletedProcess:
        return subprocess.run(
            cmd,
            stdin=stdin,
            text=True,
            capture_output=capture_output,
            env=env,
        )
