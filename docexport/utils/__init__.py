"""Utility modules for docexport.

This package provides shared utilities used across the docexport codebase:

- logging_utils: Logger setup for the CLI and long-running callers
- output: Shared rich console and JSON printing
- retry: Exponential backoff for transient transport failures
"""
