"""
Kromium Health

Healthcare appointment booking: a FastAPI service for doctors, appointments,
medical records, health metrics and an assistant chat, plus the client side
session, booking and chat logic that talks to it.
"""

__version__ = "1.0.0"
