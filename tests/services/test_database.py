import subprocess

import pytest

from mageboot.errors import BootstrapError, DatabaseUnreachableError
from mageboot.models import InstallerConfig, ProvisionResult
from mageboot.services.database import DatabaseService

REFUSED = "ERROR 2002 (HY000): Can't connect to MySQL server on 'mysql' (115)"


class DummyLogger:
    def info(self, *_args, **_kwargs):
        return None

    def warning(self, *_args, **_kwargs):
        return None


class DummyConsole:
    def print(self, *_args, **_kwargs):
        return None


def _config(**overrides) -> InstallerConfig:
    values = dict(
        database_host="mysql",
        database_name="magento_1_9",
        database_user="root",
        database_password="secret",
        base_url="http://shop.local/",
        installation_folder="/var/www/htdocs",
        filesystem_owner="www-data",
        filesystem_group="www-data",
        sample_data_folder="/root/_magento_sample_data",
    )
    values.update(overrides)
    return InstallerConfig(**values)


class FlakyServer:
    """Refuses connections until ``accept_on`` probes have been made."""

    def __init__(self, accept_on=None):
        self.accept_on = accept_on
        self.probes = 0
        self.invocations = []

    def __call__(self, invocation, check=True, capture_output=False, **_kwargs):
        self.invocations.append(invocation)
        self.probes += 1
        if self.accept_on is not None and self.probes >= self.accept_on:
            return subprocess.CompletedProcess(invocation.argv(), 0, stdout="1\n", stderr="")
        return subprocess.CompletedProcess(invocation.argv(), 1, stdout="", stderr=REFUSED)


def _service(run_cmd, sleeps):
    return DatabaseService(
        logger=DummyLogger(),
        console=DummyConsole(),
        run_cmd=run_cmd,
        sleep=sleeps.append,
    )


@pytest.mark.parametrize("accept_on", [1, 2, 5, 10])
def test_probe_succeeds_after_k_attempts_with_doubling_delay(accept_on):
    sleeps = []
    server = FlakyServer(accept_on=accept_on)

    attempts = _service(server, sleeps).wait_for_connection(_config())

    assert attempts == accept_on
    assert server.probes == accept_on
    assert sleeps == [2.0 ** i for i in range(accept_on - 1)]


def test_probe_gives_up_after_ten_attempts():
    sleeps = []
    server = FlakyServer(accept_on=None)

    with pytest.raises(DatabaseUnreachableError, match="`mysql`"):
        _service(server, sleeps).wait_for_connection(_config())

    assert server.probes == 10
    assert sleeps == [1.0, 2.0, 4.0, 8.0, 16.0, 32.0, 64.0, 128.0, 256.0]


def test_probe_does_not_attach_database_and_passes_password_via_env():
    server = FlakyServer(accept_on=1)

    _service(server, []).wait_for_connection(_config())

    argv = server.invocations[0].argv()
    assert "magento_1_9" not in argv
    assert "--execute=SELECT 1" in argv
    assert "secret" not in " ".join(argv)
    assert server.invocations[0].env == {"MYSQL_PWD": "secret"}


def test_probe_raises_immediately_on_non_connection_error():
    calls = []

    def denied(invocation, **_kwargs):
        calls.append(invocation)
        return subprocess.CompletedProcess(
            invocation.argv(),
            1,
            stdout="",
            stderr="ERROR 1045 (28000): Access denied for user 'root'@'10.0.0.3'",
        )

    with pytest.raises(BootstrapError, match="Access denied") as excinfo:
        _service(denied, []).wait_for_connection(_config())

    assert not isinstance(excinfo.value, DatabaseUnreachableError)
    assert len(calls) == 1


def _catalog_server(existing, created):
    def run_cmd(invocation, check=True, capture_output=False, **_kwargs):
        statement = next(arg for arg in invocation.argv() if arg.startswith("--execute="))
        if statement == "--execute=SHOW DATABASES":
            return subprocess.CompletedProcess(
                invocation.argv(), 0, stdout="\n".join(existing) + "\n", stderr=""
            )
        created.append(statement)
        return subprocess.CompletedProcess(invocation.argv(), 0, stdout="", stderr="")

    return run_cmd


def test_ensure_database_reports_existing():
    created = []
    service = _service(_catalog_server(["information_schema", "magento_1_9"], created), [])

    assert service.ensure_database(_config()) is ProvisionResult.EXISTED
    assert created == []


def test_ensure_database_creates_when_missing_with_case_sensitive_match():
    created = []
    service = _service(_catalog_server(["information_schema", "MAGENTO_1_9"], created), [])

    assert service.ensure_database(_config()) is ProvisionResult.CREATED
    assert created == ["--execute=CREATE DATABASE `magento_1_9`"]


def test_import_sql_file_targets_database_via_stdin():
    calls = []

    def run_cmd(invocation, **_kwargs):
        calls.append(invocation)
        return subprocess.CompletedProcess(invocation.argv(), 0, stdout="", stderr="")

    _service(run_cmd, []).import_sql_file(_config(), "/tmp/sample.sql")

    assert calls[0].stdin_path == "/tmp/sample.sql"
    assert calls[0].argv()[-1] == "magento_1_9"


def test_import_sql_file_raises_on_failure():
    def run_cmd(invocation, **_kwargs):
        return subprocess.CompletedProcess(invocation.argv(), 1, stdout="", stderr="ERROR 1064")

    with pytest.raises(BootstrapError, match="sample.sql"):
        _service(run_cmd, []).import_sql_file(_config(), "/tmp/sample.sql")
