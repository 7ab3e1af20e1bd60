"""Metrics hook protocol and no-op default implementation.

imgbbify emits counters and timings around every request.  By default a
:class:`NoopMetricsHook` is used; pass any object satisfying
:class:`MetricsHook` as ``ImgbbifyConfig.metrics`` to route the data
points to StatsD, Prometheus or similar.

Emitted metric names:

* ``imgbbify.requests_total``          -- counter, tagged ``op``/``status``
* ``imgbbify.request_duration_ms``     -- timing, tagged ``op``/``status``
* ``imgbbify.upload_success_total``    -- counter
* ``imgbbify.upload_failure_total``    -- counter, tagged ``error``
* ``imgbbify.delete_success_total``    -- counter
* ``imgbbify.delete_failure_total``    -- counter, tagged ``error``
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    *tags* keys and values are strings; backends translate them into
    their own labelling mechanism.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric by *value*."""
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
    """Default metrics implementation that discards all data points."""

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
