"""
Infrastructure layer: Redis persistence and blob storage adapters.
"""
