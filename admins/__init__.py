"""
Admins module - administrator accounts and resource scopes.

This module handles:
- Admin accounts, roles and API tokens
- Per-resource visibility scopes (all / none / own / custom)
- Resolving scopes into query filters and single-record checks
"""
