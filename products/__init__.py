"""
Products module - products, policies and downloadable files.

This module handles:
- Product and Policy catalog entries
- File assets attached to products
- Signed, time-limited download links
"""
