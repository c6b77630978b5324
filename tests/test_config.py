"""Tests for configuration handling"""
import pytest
import yaml

from git_worktree_keeper.config import (
    Config,
    ProjectConfig,
    render_annotated,
    write_annotated,
    yaml_quote,
)
from git_worktree_keeper.exceptions import ConfigNotFoundError, InvalidConfigError


class TestConfig:
    """Test runtime options."""

    def test_defaults(self):
        """Test default values."""
        config = Config()
        assert config.dry_run is False
        assert config.git_timeout is None
        assert config.get("interactive") is True

    def test_invalid_timeout(self):
        """Test non-positive timeouts are rejected."""
        with pytest.raises(ValueError, match="git_timeout must be positive"):
            Config(git_timeout=0)
        with pytest.raises(ValueError, match="hook_timeout must be positive"):
            Config(hook_timeout=-1)

    def test_from_dict_ignores_unknown(self):
        """Test unknown keys are dropped."""
        config = Config.from_dict({"dry_run": True, "bogus": 1})
        assert config.dry_run is True
        assert config.to_dict()["dry_run"] is True


class TestProjectConfig:
    """Test .worktree.yml handling."""

    def test_save_and_load(self, temp_dir):
        """Test a saved config loads back with the same values."""
        cfg = ProjectConfig(setup=["npm install"], teardown=["docker compose down"], editor="code")
        cfg.save(temp_dir)

        loaded = ProjectConfig.load(temp_dir)
        assert loaded == cfg

    def test_defaults_when_empty(self, temp_dir):
        """Test an empty file gives defaults."""
        (temp_dir / ".worktree.yml").write_text("")
        loaded = ProjectConfig.load(temp_dir)
        assert loaded.git_dir == ".bare"
        assert loaded.setup == []

    def test_null_hooks(self, temp_dir):
        """Test a bare `setup:` key is an empty list."""
        (temp_dir / ".worktree.yml").write_text("version: 1\nsetup:\nteardown:\n")
        loaded = ProjectConfig.load(temp_dir)
        assert loaded.setup == []
        assert loaded.teardown == []

    def test_missing_file(self, temp_dir):
        """Test a missing file raises ConfigNotFoundError."""
        with pytest.raises(ConfigNotFoundError):
            ProjectConfig.load(temp_dir)

    def test_invalid_yaml(self, temp_dir):
        """Test unparseable YAML raises InvalidConfigError."""
        (temp_dir / ".worktree.yml").write_text("setup: [unclosed\n")
        with pytest.raises(InvalidConfigError):
            ProjectConfig.load(temp_dir)

    def test_not_a_mapping(self, temp_dir):
        """Test a list document is rejected."""
        (temp_dir / ".worktree.yml").write_text("- a\n- b\n")
        with pytest.raises(InvalidConfigError, match="mapping"):
            ProjectConfig.load(temp_dir)

    def test_wrong_hook_type(self):
        """Test hooks must be lists of strings."""
        with pytest.raises(InvalidConfigError, match="setup"):
            ProjectConfig(setup="npm install")
        with pytest.raises(InvalidConfigError, match="teardown"):
            ProjectConfig(teardown=[1, 2])

    def test_empty_git_dir(self):
        """Test git_dir cannot be blank."""
        with pytest.raises(InvalidConfigError, match="git_dir"):
            ProjectConfig(git_dir="  ")

    def test_blank_editor_is_none(self):
        """Test a blank editor counts as unset."""
        assert ProjectConfig(editor=" ").editor is None


class TestAnnotatedConfig:
    """Test the commented config template."""

    def test_defaults_parse(self):
        """Test the default template is valid YAML with defaults."""
        data = yaml.safe_load(render_annotated())
        assert data == {"version": 1, "git_dir": ".bare"}

    def test_values_carried(self, temp_dir):
        """Test existing values survive rendering."""
        cfg = ProjectConfig(setup=["cp .env.example .env", "echo 'a: b'"], editor="zed")
        write_annotated(temp_dir, cfg)

        assert ProjectConfig.load(temp_dir) == cfg
        assert "# Commands to run after creating a new worktree" in (temp_dir / ".worktree.yml").read_text()

    def test_yaml_quote(self):
        """Test quoting only when needed."""
        assert yaml_quote("npm install") == "npm install"
        assert yaml_quote("echo a: b") == '"echo a: b"'
        assert yaml_quote("") == '""'
