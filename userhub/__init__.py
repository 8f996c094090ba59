"""
UserHub - authenticated user directory service.
"""

__version__ = "1.0.0"
