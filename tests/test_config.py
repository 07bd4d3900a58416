"""
Tests for configuration loading — project root lookup and .blueprints.yml.
"""

import textwrap
from pathlib import Path

import pytest

from blueprintkit.core.config.loader import (
    CONFIG_FILE,
    ConfigError,
    find_project_root,
    load_config,
    read_package_json,
)
from blueprintkit.core.models.config import ToolConfig


class TestFindProjectRoot:
    def test_finds_in_current_dir(self, project: Path):
        assert find_project_root(project) == project.resolve()

    def test_walks_up(self, project: Path):
        nested = project / "app" / "actions"
        nested.mkdir(parents=True)
        assert find_project_root(nested) == project.resolve()

    def test_none_outside_project(self, tmp_path: Path):
        assert find_project_root(tmp_path) is None

    def test_defaults_to_cwd(self, project: Path, monkeypatch):
        monkeypatch.chdir(project)
        assert find_project_root() == project.resolve()


class TestLoadConfig:
    def test_defaults_without_file(self, project: Path):
        config = load_config(project_root=project)
        assert config == ToolConfig()
        assert config.routes_file == "config/routes.js"
        assert config.addon_keyword == "denali-addon"

    def test_defaults_without_project(self):
        assert load_config() == ToolConfig()

    def test_valid_file(self, project: Path):
        (project / CONFIG_FILE).write_text(textwrap.dedent("""\
            routes_file: src/routes.js
            extra_blueprint_dirs:
              - tools/blueprints
        """))

        config = load_config(project_root=project)

        assert config.routes_file == "src/routes.js"
        assert config.extra_blueprint_dirs == ["tools/blueprints"]
        assert config.blueprints_dir == "blueprints"

    def test_explicit_path(self, tmp_path: Path):
        path = tmp_path / "custom.yml"
        path.write_text("addon_keyword: my-addon\n")
        assert load_config(path).addon_keyword == "my-addon"

    def test_explicit_missing_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.yml")

    def test_empty_file_is_defaults(self, project: Path):
        (project / CONFIG_FILE).write_text("")
        assert load_config(project_root=project) == ToolConfig()

    def test_invalid_yaml(self, project: Path):
        (project / CONFIG_FILE).write_text("routes_file: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(project_root=project)

    def test_not_a_mapping(self, project: Path):
        (project / CONFIG_FILE).write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(project_root=project)

    def test_schema_error(self, project: Path):
        (project / CONFIG_FILE).write_text("extra_blueprint_dirs: 42\n")
        with pytest.raises(ConfigError, match="Invalid blueprint configuration"):
            load_config(project_root=project)


class TestReadPackageJson:
    def test_reads_manifest(self, project: Path):
        assert read_package_json(project)["name"] == "my-app"

    def test_missing(self, tmp_path: Path):
        assert read_package_json(tmp_path) is None

    def test_malformed(self, tmp_path: Path):
        (tmp_path / "package.json").write_text("{ nope")
        assert read_package_json(tmp_path) is None

    def test_not_an_object(self, tmp_path: Path):
        (tmp_path / "package.json").write_text("[]")
        assert read_package_json(tmp_path) is None
