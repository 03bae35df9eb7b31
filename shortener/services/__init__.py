"""
Services module for business logic separation.

This module contains service classes that encapsulate business logic,
keeping it separate from API endpoints and the storage gateway.
"""
