"""
Utility functions for Fundbridge.

This package contains:
- business_type: Free-text legal structure → platform business type
"""
