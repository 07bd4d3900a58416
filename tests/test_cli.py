"""
Tests for CLI commands — generate, destroy, list, routes, and global options.
"""

import json
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from blueprintkit.main import cli


@pytest.fixture
def in_project(project: Path, monkeypatch) -> Path:
    monkeypatch.chdir(project)
    return project


def _invoke(*args: str):
    return CliRunner().invoke(cli, list(args))


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        result = _invoke("--help")
        assert result.exit_code == 0
        assert "generate" in result.output
        assert "destroy" in result.output

    def test_version(self):
        result = _invoke("--version")
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_invalid_config(self, in_project: Path):
        (in_project / ".blueprints.yml").write_text("- not\n- a mapping\n")
        result = _invoke("list")
        assert result.exit_code == 1
        assert "mapping" in result.output

    def test_explicit_config_missing(self, tmp_path: Path):
        result = _invoke("--config", str(tmp_path / "nope.yml"), "list")
        assert result.exit_code == 1
        assert "not found" in result.output


class TestListCommand:
    def test_lists_builtin(self, in_project: Path):
        result = _invoke("list")
        assert result.exit_code == 0
        assert "action" in result.output
        assert "blueprint" in result.output

    def test_json(self, in_project: Path):
        result = _invoke("list", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        names = {item["name"]: item for item in data}
        assert names["action"]["addon"] == "blueprintkit"
        assert names["action"]["params"] == "<name>"


class TestGenerateCommand:
    def test_help_lists_blueprints(self, in_project: Path):
        result = _invoke("generate", "--help")
        assert result.exit_code == 0
        assert "Available Blueprints" in result.output
        assert "action" in result.output

    def test_blueprint_help_shows_flags(self, in_project: Path):
        result = _invoke("generate", "action", "--help")
        assert result.exit_code == 0
        assert "--url" in result.output
        assert "--method" in result.output

    def test_unknown_blueprint(self, in_project: Path):
        result = _invoke("generate", "nope", "x")
        assert result.exit_code != 0
        assert "nope" in result.output

    def test_missing_required_param(self, in_project: Path):
        result = _invoke("generate", "action")
        assert result.exit_code != 0
        assert "NAME" in result.output

    def test_action_with_route(self, in_project: Path):
        result = _invoke("generate", "action", "posts/show", "--url", "/posts/:id")

        assert result.exit_code == 0, result.output
        assert "create" in result.output
        target = in_project / "app" / "actions" / "posts" / "show.js"
        assert "export default class ShowAction extends Action" in target.read_text()
        routes = (in_project / "config" / "routes.js").read_text()
        assert "router.get('/posts/:id', 'posts/show');" in routes

    def test_existing_file_reported(self, in_project: Path):
        _invoke("generate", "action", "index")
        result = _invoke("generate", "action", "index")
        assert result.exit_code == 0
        assert "already exists" in result.output

    def test_dry_run(self, in_project: Path):
        result = _invoke("generate", "--dry-run", "action", "index")
        assert result.exit_code == 0
        assert "[dry-run]" in result.output
        assert not (in_project / "app").exists()

    def test_json(self, in_project: Path):
        result = _invoke("generate", "--json", "action", "index")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["blueprint"] == "action"
        assert data["files"] == [{
            "path": "app/actions/index.js",
            "status": "create",
            "source": "app/actions/__name__.js",
            "forced": False,
        }]

    def test_hook_failure_reported_not_fatal(self, in_project: Path):
        (in_project / "config" / "routes.js").unlink()
        result = _invoke("generate", "action", "index", "--url", "/")
        assert result.exit_code == 0
        assert "post_install failed" in result.output
        assert (in_project / "app" / "actions" / "index.js").is_file()

    def test_generated_blueprint_is_discovered(self, in_project: Path):
        result = _invoke("generate", "blueprint", "Widget", "--description", "Make a widget")
        assert result.exit_code == 0, result.output
        assert (in_project / "blueprints" / "widget" / "blueprint.py").is_file()

        listed = json.loads(_invoke("list", "--json").output)
        widget = next(item for item in listed if item["name"] == "widget")
        assert widget["description"] == "Make a widget"
        assert widget["addon"] == "my-app"

    def test_project_blueprint_with_flags(self, in_project: Path, write_blueprint):
        write_blueprint(in_project / "blueprints", "model", {
            "app/models/__name__.js": "<% if timestamps %>// ts\n<% endif %><%= name %>\n",
        }, module="""\
            from blueprintkit.core.services.blueprint import Blueprint


            class ModelBlueprint(Blueprint):
                params = "<name> [attrs..]"
                flags = {
                    "timestamps": {"type": "boolean", "description": "Add timestamps"},
                    "version": {"type": "integer", "default": 1},
                }

                def locals(self, argv):
                    return {"name": argv["name"], "timestamps": argv["timestamps"]}
        """)

        result = _invoke("generate", "model", "post", "title", "body", "--timestamps")

        assert result.exit_code == 0, result.output
        assert (in_project / "app" / "models" / "post.js").read_text() == "// ts\npost\n"

    def test_bad_flag_type_is_skipped(self, in_project: Path, write_blueprint):
        write_blueprint(in_project / "blueprints", "odd", module="""\
            from blueprintkit.core.services.blueprint import Blueprint


            class OddBlueprint(Blueprint):
                flags = {"when": {"type": "date"}}
        """)

        assert "action" in _invoke("generate", "--help").output

        result = _invoke("generate", "odd")

        assert result.exit_code != 0
        assert "No such command" in result.output

    def test_template_error_exits(self, in_project: Path, write_blueprint):
        write_blueprint(in_project / "blueprints", "broken", {"x.js": "<%= missing %>"})
        result = _invoke("generate", "broken")
        assert result.exit_code == 1
        assert "missing" in result.output


class TestDestroyCommand:
    def test_round_trip(self, in_project: Path):
        _invoke("generate", "action", "posts/show", "--url", "/posts/:id")

        result = _invoke("destroy", "action", "posts/show", "--url", "/posts/:id")

        assert result.exit_code == 0, result.output
        assert "destroy" in result.output
        assert not (in_project / "app").exists()
        routes = (in_project / "config" / "routes.js").read_text()
        assert "/posts/:id" not in routes

    def test_modified_file_skipped(self, in_project: Path):
        _invoke("generate", "action", "index")
        target = in_project / "app" / "actions" / "index.js"
        target.write_text("// mine\n")

        result = _invoke("destroy", "action", "index")

        assert result.exit_code == 0
        assert "skipped" in result.output
        assert target.is_file()

    def test_force(self, in_project: Path):
        _invoke("generate", "action", "index")
        target = in_project / "app" / "actions" / "index.js"
        target.write_text("// mine\n")

        result = _invoke("destroy", "--force", "action", "index")

        assert result.exit_code == 0
        assert "(forced)" in result.output
        assert not target.exists()

    def test_missing_reported(self, in_project: Path):
        result = _invoke("destroy", "action", "index")
        assert result.exit_code == 0
        assert "missing" in result.output

    def test_post_uninstall_failure_exits(self, in_project: Path):
        _invoke("generate", "action", "index")
        (in_project / "config" / "routes.js").unlink()

        result = _invoke("destroy", "action", "index", "--url", "/")

        assert result.exit_code == 1
        assert "not found" in result.output


class TestRoutesCommand:
    def test_list(self, in_project: Path):
        result = _invoke("routes", "list")
        assert result.exit_code == 0
        assert "resource" in result.output

    def test_list_json(self, in_project: Path):
        result = _invoke("routes", "list", "--json")
        assert json.loads(result.output) == [
            {"method": "get", "args": ["/", "index"]},
            {"method": "resource", "args": ["post"]},
        ]

    def test_add_and_remove(self, in_project: Path):
        routes = in_project / "config" / "routes.js"

        result = _invoke("routes", "add", "get", "/about", "about")
        assert result.exit_code == 0
        assert "Added" in result.output
        assert "router.get('/about', 'about');" in routes.read_text()

        result = _invoke("routes", "add", "get", "/about", "about")
        assert "already routed" in result.output

        result = _invoke("routes", "remove", "get", "/about", "about")
        assert result.exit_code == 0
        assert "Removed 1" in result.output
        assert "/about" not in routes.read_text()

        result = _invoke("routes", "remove", "get", "/about", "about")
        assert "not found" in result.output

    def test_custom_routes_file(self, in_project: Path):
        (in_project / ".blueprints.yml").write_text("routes_file: src/router.js\n")
        (in_project / "src").mkdir()
        (in_project / "src" / "router.js").write_text(textwrap.dedent("""\
            export default function (r) {
            }
        """))

        result = _invoke("routes", "add", "get", "/", "index")

        assert result.exit_code == 0
        assert "r.get('/', 'index');" in (in_project / "src" / "router.js").read_text()

    def test_missing_routes_file(self, in_project: Path):
        (in_project / "config" / "routes.js").unlink()
        result = _invoke("routes", "add", "get", "/")
        assert result.exit_code == 1
        assert "not found" in result.output


class TestConfigureBlueprints:
    def test_find_and_configure(self, project: Path):
        from blueprintkit.ui.cli.blueprints import find_and_configure_blueprints

        commands = find_and_configure_blueprints(True, "generate", project)

        assert set(commands) == {"action", "blueprint"}
        assert [p.name for p in commands["action"].params] == ["name", "method", "url"]
