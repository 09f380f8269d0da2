"""
Run a blocking engine call off the caller's thread.

The engine itself is synchronous; this wrapper only exists so a UI can keep
rendering while parameters are generated.
"""
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


@dataclass
class BackgroundJob:
    fn: Callable
    args: tuple = ()
    kwargs: dict = field(default_factory=dict)

    _thread: Optional[threading.Thread] = field(default=None, init=False)
    _finished: threading.Event = field(default_factory=threading.Event, init=False)
    _result: Any = field(default=None, init=False)
    _error: Optional[BaseException] = field(default=None, init=False)

    def start(self):
        if self._thread is not None:
            raise RuntimeError("job already started")

        def _run():
            try:
                self._result = self.fn(*self.args, **self.kwargs)
            except Exception as exc:
                logger.debug("background job %r failed: %s", self.fn, exc)
                self._error = exc
            finally:
                self._finished.set()

        self._thread = threading.Thread(target=_run, daemon=True)
        self._thread.start()
        return self

    def done(self):
        return self._finished.is_set()

    def result(self, timeout=None):
        """Wait for the job; re-raise whatever the worker raised."""
        if self._thread is None:
            raise RuntimeError("job not started")
        if not self._finished.wait(timeout):
            raise TimeoutError("background job still running")
        if self._error is not None:
            raise self._error
        return self._result


def run_in_background(fn, *args, **kwargs):
    return BackgroundJob(fn, args, kwargs).start()
