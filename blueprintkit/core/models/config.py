"""
Tool config model — project-level settings from ``.blueprints.yml``.

Every field has a default, so a project without the file behaves as
if it had an empty one.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ToolConfig(BaseModel):
    """Settings that locate addons, blueprints and the routes file.

    Attributes:
        addon_keyword:        package.json keyword marking a dependency as an addon.
        routes_file:          Routes file, relative to the project root.
        blueprints_dir:       Blueprints directory inside every addon.
        dependencies_dir:     Where installed dependencies live.
        extra_blueprint_dirs: Additional project-relative blueprint directories.
    """

    addon_keyword: str = "denali-addon"
    routes_file: str = "config/routes.js"
    blueprints_dir: str = "blueprints"
    dependencies_dir: str = "node_modules"
    extra_blueprint_dirs: list[str] = Field(default_factory=list)
