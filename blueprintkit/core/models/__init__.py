"""
Domain models — Pydantic types for blueprintkit.

All models are re-exported here for convenient access:

    from blueprintkit.core.models import Addon, FileAction, ToolConfig
"""

from blueprintkit.core.models.addon import Addon
from blueprintkit.core.models.config import ToolConfig
from blueprintkit.core.models.template import FileAction, FileStatus

__all__ = [
    "Addon",
    "FileAction",
    "FileStatus",
    "ToolConfig",
]
