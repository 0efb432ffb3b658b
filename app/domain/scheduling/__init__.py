"""
Scheduling Domain

Provider shifts (expedientes) and the appointment slots (agendas) generated
from them.
"""

from .router import agendas_router, expedientes_router

__all__ = ["agendas_router", "expedientes_router"]
