"""
Configuration modules. Every setting is read from the environment with a default.
"""
