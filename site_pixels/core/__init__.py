"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Named constants (Earth radius, sentinels, default sites)
- exceptions: Custom exception hierarchy
"""
