"""CLI command groups — thin click wrappers over ``blueprintkit.core``."""
