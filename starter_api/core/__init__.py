"""Core module - settings, security primitives, exceptions and logging."""
