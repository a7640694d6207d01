"""
Domain Layer

Contains the opening hours schedule model, its value objects and the
domain services that normalize and query it.
"""
