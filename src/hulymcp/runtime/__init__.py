"""Runtime - retry, concurrency primitives, observability."""
