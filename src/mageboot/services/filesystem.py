"""Filesystem helpers for mageboot."""

import contextlib
import logging
import os
import shutil
from typing import Iterator

from rich.console import Console


@contextlib.contextmanager
def working_directory(path: str) -> Iterator[str]:
    """Changes into ``path`` and restores the previous directory on exit."""
    previous = os.getcwd()
    os.chdir(path)
    try:
        yield path
    finally:
        os.chdir(previous)


class FileSystemService:
    """Encapsulates file and directory side effects."""

    def __init__(self, logger: logging.Logger, console: Console):
        self.logger = logger
        self.console = console

    def copy_into(self, source: str, destination_dir: str) -> str:
        """Copies a file or directory into ``destination_dir``, overwriting existing paths."""
        os.makedirs(destination_dir, exist_ok=True)
        target = os.path.join(destination_dir, os.path.basename(os.path.normpath(source)))
        self.logger.info("Copying %s to %s", source, target)

        if os.path.isdir(source) and not os.path.islink(source):
            if os.path.exists(target) and not os.path.isdir(target):
                os.remove(target)
            shutil.copytree(source, target, symlinks=True, dirs_exist_ok=True)
        else:
            if os.path.isdir(target) and not os.path.islink(target):
                shutil.rmtree(target)
            shutil.copy2(source, target, follow_symlinks=False)
        return target

    def remove_file(self, path: str):
        os.remove(path)
        self.logger.debug("Removed file: %s", path)

    def cleanup_dir(self, path: str):
        if os.path.exists(path):
            try:
                shutil.rmtree(path)
                self.logger.debug("Removed directory: %s", path)
            except OSError as exc:
                message = f"Warning: Could not remove {path}: {exc}"
                self.console.print(f"[yellow]{message}[/yellow]")
                self.logger.warning(message)
