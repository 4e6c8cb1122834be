"""Run gauges for the publish command.

Gauges are recorded into a private prometheus_client registry. When a
Pushgateway is configured the registry is pushed once at the end of the
run; otherwise the values only live in memory (and in tests).
"""

from __future__ import annotations

from collections.abc import Callable

from prometheus_client import CollectorRegistry, Gauge, push_to_gateway

__all__ = [
    "DURATION_METRIC",
    "FAILED_METRIC",
    "SUCCEEDED_METRIC",
    "PublishMetrics",
]

DURATION_METRIC = "sfpowerscripts_publish_duration_milliseconds"
SUCCEEDED_METRIC = "sfpowerscripts_publish_succeeded"
FAILED_METRIC = "sfpowerscripts_publish_failed"

PushFn = Callable[..., None]


class PublishMetrics:
    """Gauges emitted once per publish run.

    Every gauge is labelled with publish_promoted_only and, when the operator
    supplied one, the free-form run tag.
    """

    def __init__(
        self,
        *,
        promoted_only: bool,
        run_tag: str | None = None,
        registry: CollectorRegistry | None = None,
    ) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()
        self._labels: dict[str, str] = {
            "publish_promoted_only": "true" if promoted_only else "false",
        }
        if run_tag is not None:
            self._labels["tag"] = run_tag

    @property
    def labels(self) -> dict[str, str]:
        return dict(self._labels)

    def _gauge(self, name: str, documentation: str, value: float) -> None:
        gauge = Gauge(
            name,
            documentation,
            list(self._labels),
            registry=self.registry,
        )
        gauge.labels(**self._labels).set(value)

    def record(self, *, duration_ms: float, succeeded: int, failed: int) -> None:
        self._gauge(DURATION_METRIC, "Publish run duration in milliseconds", duration_ms)
        self._gauge(SUCCEEDED_METRIC, "Artifacts published", succeeded)
        if failed > 0:
            self._gauge(FAILED_METRIC, "Artifacts failed or not promoted", failed)

    def push(self, gateway: str, *, job: str, push_fn: PushFn = push_to_gateway) -> None:
        """Push the registry to a Prometheus Pushgateway.

        Raises:
            OSError: If the gateway is unreachable.
        """
        push_fn(gateway, job=job, registry=self.registry)
