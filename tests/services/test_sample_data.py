import io
import os
import tarfile

import pytest

from mageboot.errors import BootstrapError
from mageboot.models import InstallerConfig
from mageboot.services.archive import ArchiveService
from mageboot.services.filesystem import FileSystemService
from mageboot.services.sample_data import SampleDataService


class DummyLogger:
    def info(self, *_args, **_kwargs):
        return None

    def debug(self, *_args, **_kwargs):
        return None

    def warning(self, *_args, **_kwargs):
        return None


class DummyConsole:
    def print(self, *_args, **_kwargs):
        return None


class FakeDatabase:
    def __init__(self, fail=False):
        self.fail = fail
        self.imported = []

    def import_sql_file(self, config, sql_path):
        with open(sql_path, encoding="utf-8") as file_obj:
            self.imported.append((config.database_name, os.path.basename(sql_path), file_obj.read()))
        if self.fail:
            raise BootstrapError(f"Importing `{sql_path}` failed")


def _write_tar(path, members):
    with tarfile.open(path, "w:gz") as tar_file:
        for name, content in members.items():
            data = content.encode("utf-8")
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tar_file.addfile(info, io.BytesIO(data))


def _config(tmp_path, delete=True) -> InstallerConfig:
    return InstallerConfig(
        database_host="mysql",
        database_name="magento_1_9",
        database_user="root",
        database_password="",
        base_url="http://shop.local/",
        installation_folder=str(tmp_path / "htdocs"),
        filesystem_owner="www-data",
        filesystem_group="www-data",
        sample_data_folder=str(tmp_path / "_magento_sample_data"),
        delete_sample_data_after_install=delete,
    )


def _service(database):
    logger = DummyLogger()
    console = DummyConsole()
    return SampleDataService(
        logger=logger,
        console=console,
        archive_service=ArchiveService(),
        filesystem_service=FileSystemService(logger=logger, console=console),
        database_service=database,
    )


def test_missing_folder_loads_nothing(tmp_path):
    database = FakeDatabase()

    assert _service(database).load(_config(tmp_path)) is False
    assert database.imported == []


def test_folder_without_archives_loads_nothing(tmp_path):
    folder = tmp_path / "_magento_sample_data"
    folder.mkdir()
    (folder / "readme.txt").write_text("hi", encoding="utf-8")

    assert _service(FakeDatabase()).load(_config(tmp_path)) is False
    assert folder.exists()


def test_archive_is_imported_copied_and_folder_removed(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    folder = tmp_path / "_magento_sample_data"
    folder.mkdir()
    _write_tar(
        folder / "Magento-Sample-Data-1.9.TAR.GZ",
        {
            "magento-sample-data-1.9/sample_data.sql": "INSERT INTO x VALUES (1);",
            "magento-sample-data-1.9/media/catalog/product.jpg": "jpg",
            "magento-sample-data-1.9/skin/frontend/style.css": "css",
            "magento-sample-data-1.9/LICENSE.txt": "license",
        },
    )
    database = FakeDatabase()

    loaded = _service(database).load(_config(tmp_path))

    htdocs = tmp_path / "htdocs"
    assert loaded is True
    assert database.imported == [("magento_1_9", "sample_data.sql", "INSERT INTO x VALUES (1);")]
    assert (htdocs / "media" / "catalog" / "product.jpg").read_text(encoding="utf-8") == "jpg"
    assert (htdocs / "skin" / "frontend" / "style.css").exists()
    assert (htdocs / "LICENSE.txt").exists()
    assert not (htdocs / "sample_data.sql").exists()
    assert not folder.exists()
    assert os.getcwd() == str(tmp_path)


def test_single_content_directory_is_copied_without_flattening(tmp_path):
    folder = tmp_path / "_magento_sample_data"
    folder.mkdir()
    _write_tar(
        folder / "media.tar.gz",
        {
            "media/catalog/product.jpg": "jpg",
            "media/wysiwyg/banner.jpg": "banner",
        },
    )
    database = FakeDatabase()

    assert _service(database).load(_config(tmp_path)) is True

    htdocs = tmp_path / "htdocs"
    assert database.imported == []
    assert sorted(os.listdir(htdocs)) == ["media"]
    assert (htdocs / "media" / "catalog" / "product.jpg").read_text(encoding="utf-8") == "jpg"
    assert (htdocs / "media" / "wysiwyg" / "banner.jpg").exists()


def test_sql_file_deleted_after_import_when_folder_kept(tmp_path):
    folder = tmp_path / "_magento_sample_data"
    folder.mkdir()
    _write_tar(folder / "data.tar.gz", {"dump.sql": "SELECT 1;", "a.txt": "a", "b.txt": "b"})

    _service(FakeDatabase()).load(_config(tmp_path, delete=False))

    assert folder.exists()
    assert not (folder / "data" / "dump.sql").exists()
    assert (folder / "data" / "a.txt").exists()
    assert (tmp_path / "htdocs" / "a.txt").exists()
    assert (tmp_path / "htdocs" / "b.txt").exists()


def test_failed_import_keeps_sql_file_and_raises(tmp_path):
    folder = tmp_path / "_magento_sample_data"
    folder.mkdir()
    _write_tar(folder / "data.tar.gz", {"dump.sql": "BROKEN", "a.txt": "a"})

    with pytest.raises(BootstrapError):
        _service(FakeDatabase(fail=True)).load(_config(tmp_path))

    assert (folder / "data" / "dump.sql").exists()


def test_archives_are_processed_in_sorted_order(tmp_path):
    folder = tmp_path / "_magento_sample_data"
    folder.mkdir()
    _write_tar(folder / "b.tar.gz", {"b.sql": "B"})
    _write_tar(folder / "a.tar.gz", {"a.sql": "A"})
    database = FakeDatabase()

    _service(database).load(_config(tmp_path))

    assert [name for _db, name, _sql in database.imported] == ["a.sql", "b.sql"]
