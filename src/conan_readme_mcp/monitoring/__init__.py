"""In-process metrics for tool calls, cache lookups and upstream latency."""
