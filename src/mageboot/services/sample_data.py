"""Sample-data archive import for fresh databases."""

import os
from typing import List

from mageboot.constants import SAMPLE_DATA_SUFFIX, SQL_SUFFIX
from mageboot.models import InstallerConfig
from mageboot.services.filesystem import working_directory


class SampleDataService:
    """Extracts sample-data tarballs, imports their SQL and copies the rest into the shop."""

    def __init__(self, logger, console, archive_service, filesystem_service, database_service):
        self.logger = logger
        self.console = console
        self.archive_service = archive_service
        self.filesystem_service = filesystem_service
        self.database_service = database_service

    @staticmethod
    def find_archives(folder: str) -> List[str]:
        if not os.path.isdir(folder):
            return []
        return sorted(
            name
            for name in os.listdir(folder)
            if name.lower().endswith(SAMPLE_DATA_SUFFIX)
            and os.path.isfile(os.path.join(folder, name))
        )

    @staticmethod
    def extraction_root(extraction_dir: str) -> str:
        """Descends into a single wrapper directory that carries the SQL dump.

        A lone directory without any ``*.sql`` file (e.g. ``media/``) is shop
        content and is copied as-is.
        """
        entries = os.listdir(extraction_dir)
        if len(entries) == 1:
            only_entry = os.path.join(extraction_dir, entries[0])
            if os.path.isdir(only_entry) and not os.path.islink(only_entry):
                has_dump = any(
                    name.lower().endswith(SQL_SUFFIX)
                    and os.path.isfile(os.path.join(only_entry, name))
                    for name in os.listdir(only_entry)
                )
                if has_dump:
                    return only_entry
        return extraction_dir

    def load(self, config: InstallerConfig) -> bool:
        """Returns True when at least one archive was processed."""
        folder = config.sample_data_folder
        self.console.print(f"[blue]Looking for sample data in {folder}...[/blue]")

        if not os.path.isdir(folder):
            self.console.print("[yellow]No sample data folder found, skipping.[/yellow]")
            self.logger.info("Sample data folder %s does not exist.", folder)
            return False

        archives = self.find_archives(folder)
        if not archives:
            self.console.print("[yellow]No sample data archives found, skipping.[/yellow]")
            self.logger.info("No *%s archives in %s.", SAMPLE_DATA_SUFFIX, folder)
            return False

        with working_directory(folder):
            for archive in archives:
                self._process_archive(config, os.path.join(folder, archive))

        if config.delete_sample_data_after_install:
            self.logger.info("Removing sample data folder %s", folder)
            self.filesystem_service.cleanup_dir(folder)

        self.console.print(f"[green]Loaded {len(archives)} sample data archive(s).[/green]")
        return True

    def _process_archive(self, config: InstallerConfig, archive_path: str):
        self.console.print(f"[blue]Extracting {os.path.basename(archive_path)}...[/blue]")
        extraction_dir = archive_path[: -len(SAMPLE_DATA_SUFFIX)]
        self.archive_service.safe_extract_tar(archive_path, extraction_dir)
        root = self.extraction_root(extraction_dir)

        for name in sorted(os.listdir(root)):
            path = os.path.join(root, name)
            if name.lower().endswith(SQL_SUFFIX) and os.path.isfile(path):
                self.database_service.import_sql_file(config, path)
                self.filesystem_service.remove_file(path)
            else:
                self.filesystem_service.copy_into(path, config.installation_folder)
