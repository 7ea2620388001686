"""
Core module for shared domain infrastructure.

This module contains:
- Error taxonomy, value objects and domain events
- The canonical clock and audit log
- Middleware components
- Background tasks and management commands
"""
