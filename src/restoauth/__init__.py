"""restoauth - Role-based authorization for multi-tenant restaurant management.

Resolves which roles a user holds, which restaurant locations they can
reach, and whether they may act on another user or restaurant.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
