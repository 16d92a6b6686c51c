"""
Adapters Layer - External Interfaces

This package contains all adapters for external systems:
- Providers (rates API clients)
- Persistence (shared storage for the widget)
"""

__all__ = []
