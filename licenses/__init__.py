"""
Licenses module - License management.

This module handles:
- License entity and its status state machine
- License creation, updates and revocation
- Scoped listing for admins
- The periodic expiry sweep
"""
