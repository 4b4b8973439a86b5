"""
Storage access guard for service-layer operations.

Services receive the database alias (``using``) and an optional
``OperationContext`` explicitly; nothing here reads global request state.
The guard:

- refuses to start work that is already cancelled or past its deadline
- interrupts the in-flight backend call when the deadline passes or the
  caller cancels
- translates constraint violations into ``ValidationViolation`` and other
  database faults into ``StorageUnavailable`` / ``Cancelled``
"""

import functools
import logging
import threading
import time
from contextlib import contextmanager
from typing import Callable, List, Optional

from django.db import DEFAULT_DB_ALIAS, DatabaseError, IntegrityError, connections

from apps.core.exceptions import Cancelled, StorageUnavailable, ValidationViolation

logger = logging.getLogger(__name__)


class OperationContext:
    """
    Deadline and cancellation signal supplied by the caller.

    ``deadline`` is a ``time.monotonic()`` timestamp, or ``None`` for no
    deadline. ``cancel()`` may be called from any thread.
    """

    def __init__(self, deadline: Optional[float] = None):
        self.deadline = deadline
        self._cancelled = threading.Event()
        self._callbacks: List[Callable[[], None]] = []
        self._lock = threading.Lock()

    @classmethod
    def with_timeout(cls, seconds: Optional[float]) -> 'OperationContext':
        if seconds is None:
            return cls()
        return cls(deadline=time.monotonic() + float(seconds))

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, ``None`` when unbounded."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def cancel(self):
        with self._lock:
            if self._cancelled.is_set():
                return
            self._cancelled.set()
            callbacks = list(self._callbacks)
        for callback in callbacks:
            callback()

    def add_cancel_callback(self, callback: Callable[[], None]):
        with self._lock:
            self._callbacks.append(callback)

    def remove_cancel_callback(self, callback: Callable[[], None]):
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)


class _Interrupter:
    """Aborts the running statement on ``using`` once fired."""

    def __init__(self, using: str):
        self.using = using
        # connections is thread-local; keep the calling thread's wrapper
        self.connection = connections[using]
        self._done = threading.Event()
        self._lock = threading.Lock()
        self.fired = False

    def fire(self):
        with self._lock:
            if self._done.is_set() or self.fired:
                return
            self.fired = True
            raw = self.connection.connection
            if raw is None:
                return
            # psycopg exposes cancel(), sqlite3 exposes interrupt()
            abort = getattr(raw, 'cancel', None) or getattr(raw, 'interrupt', None)
            if abort is None:
                logger.warning("Backend for %s cannot be interrupted", self.using)
                return
            logger.info("Interrupting in-flight storage call on %s", self.using)
            abort()

    def finish(self):
        with self._lock:
            self._done.set()


@contextmanager
def guarded(operation: str, *, using: str = DEFAULT_DB_ALIAS,
            context: Optional[OperationContext] = None):
    """
    Run a block of storage calls under the caller's deadline/cancel signal.

    Raises:
        ValidationViolation: the store rejected a write on a constraint.
        Cancelled: the caller cancelled before or during the block.
        StorageUnavailable: the store failed or the deadline passed.
    """
    if context is not None:
        if context.cancelled:
            raise Cancelled(f"{operation} was cancelled before it started")
        if context.expired:
            raise StorageUnavailable(f"{operation} deadline exceeded before it started")

    interrupter = _Interrupter(using)
    timer = None
    if context is not None:
        remaining = context.remaining()
        if remaining is not None:
            timer = threading.Timer(remaining, interrupter.fire)
            timer.daemon = True
            timer.start()
        context.add_cancel_callback(interrupter.fire)

    try:
        yield
    except IntegrityError as exc:
        logger.warning("Constraint violation during %s: %s", operation, exc)
        raise ValidationViolation(f"{operation} conflicts with an existing record") from exc
    except DatabaseError as exc:
        if context is not None and context.cancelled:
            raise Cancelled(f"{operation} was cancelled") from exc
        if context is not None and context.expired:
            raise StorageUnavailable(f"{operation} timed out") from exc
        logger.exception("Storage failure during %s", operation)
        raise StorageUnavailable(f"{operation} failed: storage unavailable") from exc
    finally:
        interrupter.finish()
        if timer is not None:
            timer.cancel()
        if context is not None:
            context.remove_cancel_callback(interrupter.fire)


def storage_operation(func):
    """
    Decorator for service functions.

    Adds the ``using`` and ``context`` keyword arguments and runs the body
    under ``guarded``. The wrapped function receives ``using``.
    """

    @functools.wraps(func)
    def wrapper(*args, using=DEFAULT_DB_ALIAS, context=None, **kwargs):
        with guarded(func.__name__, using=using, context=context):
            return func(*args, using=using, **kwargs)

    return wrapper
