# openapi_snapshot/errors.py
from __future__ import annotations


class SnapshotError(Exception):
    """Base error. `kind` names the failure class, `exit_code` is what the CLI exits with."""

    kind = "error"
    exit_code = 1

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message

    @property
    def is_url_related(self) -> bool:
        return False


class UsageError(SnapshotError):
    kind = "usage"
    exit_code = 1


class NetworkError(SnapshotError):
    kind = "network"
    exit_code = 1

    @property
    def is_url_related(self) -> bool:
        return True


class ParseError(SnapshotError):
    kind = "parse"
    exit_code = 2

    @property
    def is_url_related(self) -> bool:
        return True


class ReduceError(SnapshotError):
    kind = "reduce"
    exit_code = 3


class OutlineError(SnapshotError):
    kind = "outline"
    exit_code = 3


class IoError(SnapshotError):
    kind = "io"
    exit_code = 4
