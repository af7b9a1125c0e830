"""Errors reported by volume operations."""

from __future__ import annotations


class DeletedVolumeInUseError(Exception):
    """A volume could not be deleted because it is still in use."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class DanglingAttachError(Exception):
    """A volume is attached to a different node than expected."""

    def __init__(self, message: str, current_node: str, device_path: str) -> None:
        super().__init__(message)
        self.message = message
        self.current_node = current_node
        self.device_path = device_path

    def __str__(self) -> str:
        return self.message


def is_deleted_volume_in_use(err: BaseException | None) -> bool:
    """Return True if *err* reports a deleted volume that is still in use."""
    return isinstance(err, DeletedVolumeInUseError)


def is_dangling_error(err: BaseException | None) -> bool:
    """Return True if *err* reports a dangling attachment."""
    return isinstance(err, DanglingAttachError)