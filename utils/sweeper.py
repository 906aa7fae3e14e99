from __future__ import annotations

import logging
import threading

logger = logging.getLogger(__name__)


class TokenSweeper:
    """
    Background deletion of expired refresh tokens.

    - start() launches one daemon thread that calls run_once() every
      `interval_s` seconds until stop()
    - run_once() never raises: a failed sweep is logged and the next tick
      runs as usual
    - each tick releases the thread's DB session afterwards
    """

    def __init__(self, store, interval_s: float = 3600.0) -> None:
        self.store = store
        self.interval_s = float(interval_s)
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="refresh-token-sweeper", daemon=True)
        self._thread.start()
        logger.info("Refresh token sweeper started (every %.0fs)", self.interval_s)

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout=timeout)
            logger.info("Refresh token sweeper stopped")

    def run_once(self) -> int:
        try:
            removed = self.store.sweep_expired()
        except Exception:
            logger.exception("Error cleaning up expired tokens")
            return 0
        finally:
            self.store.storage.close()
        if removed:
            logger.info("Cleaned up %d expired refresh tokens", removed)
        return removed

    def _loop(self) -> None:
        while not self._stop.wait(self.interval_s):
            self.run_once()
