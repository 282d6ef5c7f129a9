"""Prometheus metrics for the sync cycle."""
from prometheus_client import Counter, Histogram

sync_cycles_total = Counter(
    "taskboard_sync_cycles_total",
    "Total sync cycles by outcome",
    ["outcome"],
)

sync_duration_seconds = Histogram(
    "taskboard_sync_duration_seconds",
    "Sync cycle duration in seconds",
)

synced_tasks_total = Counter(
    "taskboard_synced_tasks_total",
    "Total task records written by sync cycles",
)
