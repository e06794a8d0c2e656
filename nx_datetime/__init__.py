"""
nx_datetime

Generates read-only date/time accessors for classes whose fields carry
conversion directives.
"""

__version__ = "0.1.0"
