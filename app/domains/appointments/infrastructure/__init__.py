"""
Appointments Infrastructure Layer

Persistence (SQLAlchemy and in-memory), unit of work, notification
dispatchers and the JWT auth provider.
"""
