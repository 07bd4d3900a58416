"""Scaffold a new blueprint inside the current project."""

from __future__ import annotations

from typing import Any

from blueprintkit.core.services.blueprint import Blueprint
from blueprintkit.core.services.naming import dasherize


class BlueprintBlueprint(Blueprint):
    blueprint_name = "blueprint"
    description = "Create a new blueprint in this project"
    params = "<name>"
    flags = {
        "description": {
            "description": "Help text for the new blueprint",
            "type": "string",
        },
    }

    def locals(self, argv: dict[str, Any]) -> dict[str, Any]:
        name = dasherize(argv["name"])
        return {
            "name": name,
            "description": argv.get("description") or f"Generate a {name}",
        }
