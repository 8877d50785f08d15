"""Exception hierarchy shared by the probe, the hash pipeline and the registry.

Every failure a command can hit is fatal for that invocation. The classes
below only exist so the CLI can report a readable message and tests can
assert on the failure category.
"""

from __future__ import annotations

__all__ = [
    "NixSourceError",
    "TransportError",
    "OracleError",
    "MalformedHashError",
    "RegistryError",
    "DuplicateSourceError",
    "MissingSourceError",
]


class NixSourceError(RuntimeError):
    """Base exception for every nix-source failure."""


class TransportError(NixSourceError):
    """Raised when the HEAD probe cannot complete or returns an error status."""

    def __init__(self, url: str, cause: BaseException | str) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"request to {url} failed: {cause}")


class OracleError(NixSourceError):
    """Raised when an external hashing tool is missing or exits non-zero.

    The tool's stderr is inherited by the terminal, so the message only names
    the command and its exit status.
    """

    def __init__(self, command: str, returncode: int | None = None, detail: str | None = None) -> None:
        self.command = command
        self.returncode = returncode
        if detail:
            message = f"{command}: {detail}"
        elif returncode is not None:
            message = f"{command} exited with status {returncode}"
        else:
            message = f"{command} failed"
        super().__init__(message)


class MalformedHashError(NixSourceError):
    """Raised when oracle output cannot be parsed as a subresource-integrity string."""


class RegistryError(NixSourceError):
    """Raised when the sources file cannot be read or holds invalid records."""


class DuplicateSourceError(RegistryError):
    """Raised when adding a name that already exists in the registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"source {name} already exists")


class MissingSourceError(RegistryError):
    """Raised when updating or removing a name the registry does not hold."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"source {name} does not exist")
