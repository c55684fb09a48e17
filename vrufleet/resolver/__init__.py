"""Station config resolver.

Maps an asset id (or an asset class registered with the fleet) to its
financial StationConfig. Pure-python, deterministic. See `vrufleet/resolver/core.py`.
"""
