"""
docexport - Document store export toolkit
"""

__version__ = "0.3.0"
