"""Configuration and observability for the opening hours library."""
