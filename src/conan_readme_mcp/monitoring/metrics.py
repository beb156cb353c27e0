from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple


@dataclass
class Counter:
    name: str
    help: str
    values: Dict[Tuple, float] = field(default_factory=dict)

    def inc(self, value: float = 1.0, **labels: Any) -> None:
        key = tuple(sorted(labels.items()))
        self.values[key] = self.values.get(key, 0.0) + value

    def get(self, **labels: Any) -> float:
        return self.values.get(tuple(sorted(labels.items())), 0.0)


@dataclass
class Histogram:
    name: str
    help: str
    buckets: List[float]
    counts: Dict[Tuple, List[int]] = field(default_factory=dict)

    def observe(self, val: float, **labels: Any) -> None:
        key = tuple(sorted(labels.items()))
        if key not in self.counts:
            # last slot counts observations above the largest bucket
            self.counts[key] = [0 for _ in range(len(self.buckets) + 1)]
        for i, b in enumerate(self.buckets):
            if val <= b:
                self.counts[key][i] += 1
                break
        else:
            self.counts[key][-1] += 1

    def total(self, **labels: Any) -> int:
        return sum(self.counts.get(tuple(sorted(labels.items())), []))


# Predefined metrics
tool_calls_total = Counter("tool_calls_total", "Tool invocations by tool and outcome")
cache_lookups_total = Counter("cache_lookups_total", "Cache lookups by namespace and hit/miss")
upstream_latency_seconds = Histogram(
    "upstream_latency_seconds",
    "Latency of upstream registry calls",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)
