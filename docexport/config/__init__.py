"""Configuration for docexport."""
