"""
Circuit breaker pattern implementation for resilient service calls.

A breaker is an explicit object: construct one per protected dependency at
startup and hand it to the client that calls that dependency.
"""

import asyncio
import threading
import time
from enum import Enum
from typing import Dict, Any, Optional, Callable, Awaitable, Tuple, Type

from shared.logging import get_logger


class CircuitBreakerState(Enum):
    """Circuit breaker states."""
    CLOSED = "closed"      # Normal operation
    OPEN = "open"          # Failing, requests blocked
    HALF_OPEN = "half_open"  # Single probe testing recovery


class CircuitBreakerOpenException(Exception):
    """Exception raised when circuit breaker rejects a call."""

    def __init__(self, name: str, state: CircuitBreakerState):
        self.name = name
        self.state = state
        super().__init__(f"Circuit breaker '{name}' is {state.name} - blocking call")


StateListener = Callable[[str, CircuitBreakerState, CircuitBreakerState], None]


class CircuitBreaker:
    """Circuit breaker with a single-probe half-open state.

    ``call`` checks permission before invoking the wrapped coroutine, so a
    rejected call never reaches the dependency. State lives behind a lock
    whose critical sections never await, which keeps every transition
    atomic for concurrent tasks and threads alike.

    Exceptions in ``excluded_exceptions`` are re-raised but counted as
    successes: the dependency answered, it just answered "no".
    """

    def __init__(self,
                 failure_threshold: int = 3,
                 success_threshold: int = 1,
                 recovery_timeout: float = 5.0,
                 excluded_exceptions: Tuple[Type[BaseException], ...] = (),
                 name: str = "default",
                 clock: Callable[[], float] = time.monotonic,
                 on_state_change: Optional[StateListener] = None):
        if failure_threshold < 1:
            raise ValueError("failure_threshold must be at least 1")
        if success_threshold < 1:
            raise ValueError("success_threshold must be at least 1")

        self.failure_threshold = failure_threshold
        self.success_threshold = success_threshold
        self.recovery_timeout = recovery_timeout
        self.excluded_exceptions = tuple(excluded_exceptions)
        self.name = name
        self.logger = get_logger(f"circuit_breaker.{name}")

        self._clock = clock
        self._on_state_change = on_state_change
        self._lock = threading.Lock()

        self._state = CircuitBreakerState.CLOSED
        self._failure_count = 0
        self._success_count = 0
        self._opened_at = 0.0
        self._probe_in_flight = False

    @property
    def state(self) -> CircuitBreakerState:
        with self._lock:
            return self._state

    def is_open(self) -> bool:
        """Check if circuit breaker is in OPEN state."""
        return self.state == CircuitBreakerState.OPEN

    async def call(self, func: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
        """Execute function with circuit breaker protection.

        The function is awaited at most once; nothing is retried here.
        """
        is_probe = self._acquire()

        try:
            result = await func(*args, **kwargs)
        except asyncio.CancelledError:
            self._release(is_probe)
            raise
        except self.excluded_exceptions:
            self._record_success(is_probe)
            raise
        except Exception as e:
            self._record_failure(is_probe, e)
            raise

        self._record_success(is_probe)
        return result

    def _acquire(self) -> bool:
        """Admit or reject a call. Returns True when the call is the probe."""
        with self._lock:
            if self._state == CircuitBreakerState.CLOSED:
                return False

            if self._state == CircuitBreakerState.OPEN:
                if self._clock() - self._opened_at < self.recovery_timeout:
                    raise CircuitBreakerOpenException(self.name, self._state)
                self._transition(CircuitBreakerState.HALF_OPEN)
                self._success_count = 0

            # HALF_OPEN: one probe at a time
            if self._probe_in_flight:
                raise CircuitBreakerOpenException(self.name, self._state)
            self._probe_in_flight = True
            return True

    def _release(self, is_probe: bool):
        """Free the probe slot of an aborted call without recording an outcome."""
        if not is_probe:
            return
        with self._lock:
            self._probe_in_flight = False
        self.logger.info("Circuit breaker probe cancelled, slot released")

    def _record_success(self, is_probe: bool):
        with self._lock:
            if is_probe:
                self._probe_in_flight = False
                self._success_count += 1
                if self._success_count >= self.success_threshold:
                    self._failure_count = 0
                    self._success_count = 0
                    self._transition(CircuitBreakerState.CLOSED)
            elif self._state == CircuitBreakerState.CLOSED:
                self._failure_count = 0

    def _record_failure(self, is_probe: bool, error: Exception):
        """Record a failure and update state."""
        with self._lock:
            if is_probe:
                self._probe_in_flight = False
                self._success_count = 0
                self._open()
            elif self._state == CircuitBreakerState.CLOSED:
                self._failure_count += 1
                if self._failure_count >= self.failure_threshold:
                    self._open()
            # Late results from calls admitted before the breaker opened
            # do not move an OPEN or HALF_OPEN breaker.
            failure_count = self._failure_count

        self.logger.warning(
            "Circuit breaker recorded failure",
            failure_count=failure_count,
            threshold=self.failure_threshold,
            error_type=type(error).__name__,
        )

    def _open(self):
        self._opened_at = self._clock()
        self._transition(CircuitBreakerState.OPEN)

    def _transition(self, new_state: CircuitBreakerState):
        # Caller holds the lock
        old_state = self._state
        self._state = new_state
        if old_state == new_state:
            return
        self.logger.info(
            "Circuit breaker state change",
            from_state=old_state.value,
            to_state=new_state.value,
        )
        if self._on_state_change is not None:
            self._on_state_change(self.name, old_state, new_state)

    def get_state(self) -> Dict[str, Any]:
        """Get current circuit breaker state."""
        with self._lock:
            return {
                "name": self.name,
                "state": self._state.value,
                "failure_count": self._failure_count,
                "success_count": self._success_count,
                "opened_at": self._opened_at,
                "probe_in_flight": self._probe_in_flight,
                "failure_threshold": self.failure_threshold,
                "success_threshold": self.success_threshold,
                "recovery_timeout": self.recovery_timeout,
            }
