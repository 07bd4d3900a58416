"""<%= description %>"""

from __future__ import annotations

from typing import Any

from blueprintkit.core.services.blueprint import Blueprint


class GeneratedBlueprint(Blueprint):
    blueprint_name = "<%= name %>"
    description = "<%= description %>"
    params = "<name>"

    def locals(self, argv: dict[str, Any]) -> dict[str, Any]:
        return {"name": argv["name"]}
