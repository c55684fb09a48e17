"""Asset repository and fleet aggregation.

- store.py: lazily built, memoized per-asset extended records
- fleet.py: base-currency fleet aggregate with a generation-checked cache
"""
