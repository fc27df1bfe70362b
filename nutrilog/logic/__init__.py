"""Core business logic layer.

Subpackages:
- reporting: nutrition statistics, score, insights and daily totals
- quota: per-user AI analysis quota

Nothing in this package performs I/O; callers fetch meals and pass them in.
"""
__all__ = ["reporting", "quota"]
