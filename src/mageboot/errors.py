"""Domain errors for mageboot."""


class BootstrapError(RuntimeError):
    """Raised when the first-boot setup cannot continue safely."""


class DatabaseUnreachableError(BootstrapError):
    """Raised when the readiness probe exhausts its attempts."""


class CommandFailedError(BootstrapError):
    """Raised when an external tool exits with a non-zero status."""

    def __init__(self, message: str, returncode: int):
        super().__init__(message)
        self.returncode = returncode
