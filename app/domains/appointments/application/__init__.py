"""
Appointments Application Layer

Ports (interfaces) and use cases for the appointments domain.
"""
