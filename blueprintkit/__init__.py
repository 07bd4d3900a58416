"""
blueprintkit — generate and destroy project files from blueprints.
"""

__version__ = "0.1.0"
