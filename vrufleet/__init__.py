"""VRU fleet telemetry repository.

Lazily built per-asset recovery series, station financial configs, and a
base-currency fleet aggregate. Entry points live in `vrufleet.api.service`.
"""
