"""
LinkVault backend: self-destructing text and file links.
"""
