"""
Salon Scheduler

A FastAPI-based scheduling backend for a single-location salon, with staff
authentication, role-based write access, and double-booking prevention.
"""

__version__ = "1.0.0"
