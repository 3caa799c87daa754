"""HTTP API for LinkVault."""
