"""Exports & reporting: CSV writers and Markdown reports.

- writers.py: CSV emitters with fixed column schemas (daily, monthly, hourly, fleet)
- reports.py: fleet summary and validation_report markdown generators
"""
