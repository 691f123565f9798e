"""CLI command modules for docexport."""
