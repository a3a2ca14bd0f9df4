"""Metrics hook protocol and no-op default implementation.

The transport emits counters and timings for every private API call.  By
default a :class:`NoopMetricsHook` is used so there is zero overhead.
Callers can pass any object satisfying :class:`MetricsHook` as
``NocliConfig(metrics=...)``.

Emitted metric names:

* ``nocli.requests_total``       -- counter (tags: endpoint, status)
* ``nocli.request_duration_ms``  -- timing (tags: endpoint, status)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    All methods accept an optional *tags* dict of string keys and values.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that silently discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
