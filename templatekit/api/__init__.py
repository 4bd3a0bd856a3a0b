"""
API routers for the template builder.
"""

from templatekit.api import templates

__all__ = ["templates"]
