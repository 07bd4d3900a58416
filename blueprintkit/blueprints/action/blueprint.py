"""Generate an action, and route to it when a URL is given."""

from __future__ import annotations

from typing import Any

from blueprintkit.core.services.blueprint import Blueprint
from blueprintkit.core.services.naming import dasherize, last_segment, pascal_case


class ActionBlueprint(Blueprint):
    blueprint_name = "action"
    description = "Create an action (and its route with --url)"
    params = "<name>"
    flags = {
        "method": {
            "description": "HTTP method for the route",
            "type": "string",
            "default": "get",
        },
        "url": {
            "description": "URL pattern to route to the new action",
            "type": "string",
        },
    }

    def locals(self, argv: dict[str, Any]) -> dict[str, Any]:
        name = self._action_path(argv)
        return {
            "name": name,
            "class_name": pascal_case(last_segment(name)) + "Action",
        }

    def post_install(self, argv: dict[str, Any]) -> None:
        if argv.get("url"):
            self.add_route(argv.get("method") or "get", argv["url"], self._action_path(argv))

    def post_uninstall(self, argv: dict[str, Any]) -> None:
        if argv.get("url"):
            self.remove_route(argv.get("method") or "get", argv["url"], self._action_path(argv))

    @staticmethod
    def _action_path(argv: dict[str, Any]) -> str:
        return "/".join(dasherize(part) for part in argv["name"].strip("/").split("/"))
