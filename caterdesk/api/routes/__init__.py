"""
API route modules.
"""

from . import auth, dashboard, reviews, inquiries, menu, admins

__all__ = ["auth", "dashboard", "reviews", "inquiries", "menu", "admins"]
