"""Billing Domain - procedure pricing and billing entries (lançamentos)"""

from .router import router

__all__ = ["router"]
