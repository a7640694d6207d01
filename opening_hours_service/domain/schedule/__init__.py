"""
Weekly Schedule Domain

Value objects and services for timezone-aware weekly opening hours.
"""
