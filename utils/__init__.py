"""
utils/ - Shared Helpers
=======================
Logging, errors and calendar arithmetic used by every layer.
"""
