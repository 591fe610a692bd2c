"""
Identity service: users, feature flags and their assignments.
"""

__version__ = "1.0.0"
