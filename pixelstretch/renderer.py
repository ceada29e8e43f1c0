"""
Background rendering where only the newest request wins.

Settings change far more often than a large render completes. The
``StretchRenderer`` accepts a new request at any time; every request is
tagged with a generation number and a finished render is only published if
no newer request was submitted in the meantime. Superseded renders are not
aborted mid-loop, their results are simply discarded.

Example:
    >>> with StretchRenderer() as renderer:
    ...     renderer.submit(image, settings)
    ...     renderer.submit(image, settings.with_changes(noise=0))
    ...     buffer = renderer.wait()   # rendered with noise=0
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

import numpy as np

from .pipeline import render
from .settings import StretchSettings

logger = logging.getLogger(__name__)


class StretchRenderer:
    """Runs renders on a worker pool and keeps the most recent result.

    :param max_workers: Number of renders that may run concurrently
    :param rng_factory: Called once per render to create its random source,
        defaults to an unseeded ``np.random.default_rng``
    :param on_result: Optional callback ``(generation, buffer)`` invoked for
        every published (non-stale) result. Callbacks never overlap and fire in
        increasing generation order, so the last one carries the newest buffer.
    """

    def __init__(
        self,
        max_workers: int = 2,
        rng_factory: Optional[Callable[[], np.random.Generator]] = None,
        on_result: Optional[Callable[[int, np.ndarray], None]] = None,
    ):
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='pixelstretch')
        self._rng_factory = rng_factory or np.random.default_rng
        self._on_result = on_result
        self._lock = threading.Lock()
        # Serializes publish and callback so results are shown in generation order
        self._publish_lock = threading.Lock()
        self._generation = 0
        self._published_generation = 0
        self._latest: Optional[np.ndarray] = None
        self._pending: Optional[Future] = None

    @property
    def generation(self) -> int:
        """Generation number of the newest submitted request."""
        with self._lock:
            return self._generation

    @property
    def published_generation(self) -> int:
        """Generation number of the buffer returned by ``latest()`` (0 if none)."""
        with self._lock:
            return self._published_generation

    def submit(self, image: np.ndarray, settings: StretchSettings) -> Future:
        """Queue a render and make it the newest request.

        The returned future resolves to the rendered buffer, or to ``None``
        if a newer request superseded it before it finished.
        """
        with self._lock:
            self._generation += 1
            generation = self._generation
            future = self._executor.submit(self._run, generation, image, settings)
            self._pending = future
        return future

    def _run(self, generation: int, image: np.ndarray, settings: StretchSettings) -> Optional[np.ndarray]:
        try:
            result = render(image, settings, rng=self._rng_factory())
        except Exception as e:
            logger.error(f"Render generation {generation} failed: {e}")
            raise

        with self._publish_lock:
            with self._lock:
                if generation != self._generation:
                    logger.debug(f"Discarding stale render {generation} (newest is {self._generation})")
                    return None
                self._latest = result
                self._published_generation = generation

            if self._on_result is not None:
                self._on_result(generation, result)
        return result

    def latest(self) -> Optional[np.ndarray]:
        """The most recently published buffer, or None."""
        with self._lock:
            return self._latest

    def wait(self, timeout: Optional[float] = None) -> Optional[np.ndarray]:
        """Block until the newest request has finished and return its buffer.

        Re-checks after each completion in case another request arrived while
        waiting.
        """
        while True:
            with self._lock:
                pending = self._pending
            if pending is None:
                return self.latest()
            result = pending.result(timeout=timeout)
            with self._lock:
                if pending is self._pending:
                    return result

    def close(self, wait: bool = True) -> None:
        """Shut the worker pool down."""
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> 'StretchRenderer':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ['StretchRenderer']
