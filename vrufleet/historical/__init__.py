"""Historical series: distribution, builders and the curated catalog.

- timeseries.py: record types, distribute, monthly aggregation, validation
- catalog.py / curated_history.json: curated monthly tables keyed by asset id
- builders.py: curated, synthetic and placeholder daily series; hourly window
- kpi.py: fleet totals and environmental equivalences
"""
