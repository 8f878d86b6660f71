import threading
from typing import Callable, Dict


class EvictionScheduler:
    """Keyed, cancellable delayed callbacks backed by Socket.IO background tasks.

    At most one live task exists per key: arming again replaces the pending
    token, and a worker whose token was replaced or cancelled wakes up and
    returns without calling back.
    """

    def __init__(self, socketio):
        self._socketio = socketio
        self._tokens: Dict[str, object] = {}
        self._lock = threading.Lock()

    def arm(self, key: str, delay: float, callback: Callable[[], None]) -> None:
        token = object()
        with self._lock:
            self._tokens[key] = token
        self._socketio.start_background_task(self._runner, key, token, delay, callback)

    def cancel(self, key: str) -> None:
        with self._lock:
            self._tokens.pop(key, None)

    def is_armed(self, key: str) -> bool:
        with self._lock:
            return key in self._tokens

    def _runner(self, key: str, token: object, delay: float, callback: Callable[[], None]) -> None:
        self._socketio.sleep(delay)
        with self._lock:
            if self._tokens.get(key) is not token:
                return
            del self._tokens[key]
        callback()
