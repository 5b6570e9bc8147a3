"""
Shared utilities and infrastructure components: logging and error types.
"""
