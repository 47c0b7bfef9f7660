"""Archive extraction helpers for mageboot."""

import os
import tarfile
from pathlib import Path

from mageboot.errors import BootstrapError


class ArchiveService:
    """Encapsulates safe tarball extraction logic."""

    def is_within_dir(self, base_dir: Path, candidate: Path) -> bool:
        try:
            return os.path.commonpath([str(base_dir), str(candidate)]) == str(base_dir)
        except ValueError:
            return False

    def safe_extract_tar(self, tar_path: str, destination_dir: str):
        base = Path(destination_dir).resolve()
        base.mkdir(parents=True, exist_ok=True)

        try:
            with tarfile.open(tar_path, "r:gz") as tar_ref:
                members = tar_ref.getmembers()
                for member in members:
                    target_path = (base / member.name).resolve()

                    if not self.is_within_dir(base, target_path):
                        raise BootstrapError(
                            f"Unsafe archive entry detected: `{member.name}`. "
                            "Archive extraction aborted to prevent path traversal."
                        )

                    if member.issym() or member.islnk():
                        link_base = target_path.parent if member.issym() else base
                        link_target = (link_base / member.linkname).resolve()
                        if not self.is_within_dir(base, link_target):
                            raise BootstrapError(
                                f"Unsafe archive entry detected: `{member.name}` links outside "
                                "the extraction directory."
                            )

                    if member.isdev():
                        raise BootstrapError(
                            f"Unsafe archive entry detected: `{member.name}` is a device file."
                        )

                tar_ref.extractall(path=str(base), members=members, filter="data")
        except (tarfile.TarError, EOFError) as exc:
            raise BootstrapError(f"Invalid tar.gz archive: {tar_path}") from exc
