import threading
from typing import Optional


class CancelToken:
    """Cooperative cancellation flag shared by a caller and one worker."""

    def __init__(self) -> None:
        self._flag = threading.Event()

    def cancel(self) -> None:
        self._flag.set()

    def is_cancelled(self) -> bool:
        return self._flag.is_set()

    def __call__(self) -> bool:
        return self._flag.is_set()

    def sleep(self, seconds: Optional[float]) -> bool:
        """
        Sleep up to `seconds`, waking early on cancel.
        Returns True if cancelled.
        """
        if seconds and seconds > 0:
            return self._flag.wait(seconds)
        return self._flag.is_set()
