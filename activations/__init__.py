"""
Activations module - device binding and slot management.

This module handles:
- DeviceActivation entity and device fingerprints
- Device slot limits per license
- Client activate/validate and admin device operations
"""
