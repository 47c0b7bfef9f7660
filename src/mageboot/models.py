"""Shared domain models for mageboot."""

import enum
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from mageboot import constants

MASK = "******"


@dataclass(frozen=True)
class InstallerConfig:
    """Connection and install parameters resolved once at startup."""

    database_host: str
    database_name: str
    database_user: str
    database_password: str
    base_url: Optional[str]
    installation_folder: str
    filesystem_owner: str
    filesystem_group: str
    sample_data_folder: str
    delete_sample_data_after_install: bool = True
    probe_max_attempts: int = constants.PROBE_MAX_ATTEMPTS
    probe_initial_delay: float = constants.PROBE_INITIAL_DELAY
    installer_command: str = constants.DEFAULT_INSTALLER_COMMAND
    mysql_command: str = constants.DEFAULT_MYSQL_COMMAND

    def masked(self) -> Dict[str, Any]:
        data = asdict(self)
        if data["database_password"]:
            data["database_password"] = MASK
        return data


class ProvisionResult(enum.Enum):
    EXISTED = "existed"
    CREATED = "created"


@dataclass(frozen=True)
class Flag:
    """Renders as ``--name``."""

    name: str

    def render(self, mask_secrets: bool = False) -> str:
        return f"--{self.name}"


@dataclass(frozen=True)
class KeyValue:
    """Renders as ``--name=value``."""

    name: str
    value: str
    secret: bool = False

    def render(self, mask_secrets: bool = False) -> str:
        value = MASK if (mask_secrets and self.secret) else self.value
        return f"--{self.name}={value}"


@dataclass(frozen=True)
class Positional:
    """Passed through verbatim."""

    value: str

    def render(self, mask_secrets: bool = False) -> str:
        return self.value


Argument = Union[Flag, KeyValue, Positional]


def arguments_from_mapping(
    mapping: Mapping[Union[int, str], Any], secret_keys: Tuple[str, ...] = ()
) -> List[Argument]:
    """Converts an installer option mapping into tagged arguments.

    ``True`` becomes a bare flag, ``False``/``None`` are dropped, integer keys
    are positional, everything else is ``--key=value``.
    """
    arguments: List[Argument] = []
    for key, value in mapping.items():
        if isinstance(key, int):
            arguments.append(Positional(str(value)))
        elif value is True:
            arguments.append(Flag(key))
        elif value is False or value is None:
            continue
        else:
            arguments.append(KeyValue(key, str(value), secret=key in secret_keys))
    return arguments


@dataclass(frozen=True)
class Invocation:
    """A program plus structured arguments, rendered to argv in one place."""

    program: str
    arguments: Tuple[Argument, ...] = ()
    stdin_path: Optional[str] = None
    env: Dict[str, str] = field(default_factory=dict)

    def argv(self, mask_secrets: bool = False) -> List[str]:
        return [self.program] + [arg.render(mask_secrets) for arg in self.arguments]
