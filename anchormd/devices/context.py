"""Backend contexts for the accelerated execution path."""

from __future__ import annotations

from abc import ABC, abstractmethod


class DeviceContext(ABC):
    """
    Abstract base class for accelerated backend contexts.

    A context is the handle the accelerated strategy dispatches through.
    Its absence, or an unavailable context, downgrades an engine to the
    reference path.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return device name."""
        ...

    @property
    def is_available(self) -> bool:
        """Check whether the device can execute work."""
        return True

    def synchronize(self) -> None:
        """Wait for queued work to finish (no-op for synchronous devices)."""
        pass


class HostDeviceContext(DeviceContext):
    """
    Accelerated path executed synchronously on the host.

    Useful where no dedicated accelerator exists but the accelerated
    strategy's output is still wanted.
    """

    def __init__(self, name: str = "host") -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name
