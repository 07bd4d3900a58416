"""Configuration — project config, addon discovery, blueprint loading."""
