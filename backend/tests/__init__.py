"""
Tests package for the LinkVault backend.
"""
