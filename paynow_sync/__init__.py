"""
Job de sincronización de órdenes completadas PayNow -> PostgreSQL.
"""

__version__ = "1.0.0"
