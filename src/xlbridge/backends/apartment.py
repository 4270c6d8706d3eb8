from __future__ import annotations

import logging
import sys
import threading
from types import ModuleType, TracebackType
from typing import Any

logger = logging.getLogger(__name__)


def load_pythoncom() -> ModuleType | None:
    """Return ``pythoncom`` on Windows; ``None`` elsewhere (no apartments)."""
    if sys.platform != "win32":
        return None
    import pythoncom

    return pythoncom


class ComApartment:
    """Binds the calling thread to a single-threaded COM apartment.

    ``acquire`` initializes COM in STA mode, ``release`` uninitializes it
    exactly once. Both are no-ops off Windows. Every successful
    ``CoInitializeEx`` (S_OK or S_FALSE) is paired with ``CoUninitialize``.
    """

    def __init__(self, pythoncom: Any | None = None) -> None:
        self._pythoncom = pythoncom if pythoncom is not None else load_pythoncom()
        self._initialized = False
        self._released = False
        self._thread_id: int | None = None

    @property
    def active(self) -> bool:
        return self._initialized and not self._released

    def acquire(self) -> ComApartment:
        if self._pythoncom is None or self._initialized:
            return self
        self._thread_id = threading.get_ident()
        hr = self._pythoncom.CoInitializeEx(self._pythoncom.COINIT_APARTMENTTHREADED)
        # S_OK and S_FALSE both need a matching CoUninitialize; failures raise.
        self._initialized = True
        logger.debug("COM initialized (STA) thread=%s hr=%s", self._thread_id, hr)
        return self

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        if not self._initialized or self._pythoncom is None:
            return
        self._pythoncom.CoUninitialize()
        logger.debug("COM uninitialized thread=%s", self._thread_id)

    def __enter__(self) -> ComApartment:
        return self.acquire()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()


__all__ = ["ComApartment", "load_pythoncom"]
