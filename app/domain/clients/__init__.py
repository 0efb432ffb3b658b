"""Clients Domain - patients and their insurance plans"""

from .router import router

__all__ = ["router"]
