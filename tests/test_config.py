"""Tests for configuration loading."""

import pytest

import unlockwatch
import unlockwatch.config
from unlockwatch.command import DEFAULT_ARGV


@pytest.fixture
def config_home(tmp_path, monkeypatch):
	monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "home"))
	monkeypatch.setenv("XDG_CONFIG_DIRS", str(tmp_path / "etc"))
	return tmp_path


def write_config(base, text):
	config_dir = base / "unlockwatch"
	config_dir.mkdir(parents=True)
	(config_dir / "config.py").write_text(text)


class TestLoad:
	def test_defaults_without_config_file(self, config_home):
		configurator = unlockwatch.config.load()
		assert configurator.command.argv == DEFAULT_ARGV
		assert configurator.resolver == "list"

	def test_user_config(self, config_home):
		write_config(config_home / "home", (
			"def config(c):\n"
			"\tc.unlock_command('notify-send', 'Welcome back', URGENCY='low')\n"
			"\tc.resolve_session_by('path')\n"
		))
		configurator = unlockwatch.config.load()
		assert configurator.command.argv == ("notify-send", "Welcome back")
		assert configurator.command.env == (("URGENCY", "low"),)
		assert configurator.resolver == "path"

	def test_system_config_is_used_as_fallback(self, config_home):
		write_config(config_home / "etc", "def config(c):\n\tc.unlock_command('from-etc')\n")
		assert unlockwatch.config.load().command.argv == ("from-etc",)

	def test_user_config_takes_precedence(self, config_home):
		write_config(config_home / "etc", "def config(c):\n\tc.unlock_command('from-etc')\n")
		write_config(config_home / "home", "def config(c):\n\tc.unlock_command('from-home')\n")
		assert unlockwatch.config.load().command.argv == ("from-home",)

	def test_reload_resets_settings(self, config_home):
		write_config(config_home / "home", "def config(c):\n\tc.resolve_session_by('path')\n")
		assert unlockwatch.config.load().resolver == "path"
		(config_home / "home" / "unlockwatch" / "config.py").unlink()
		assert unlockwatch.config.load().resolver == "list"

	def test_config_without_function(self, config_home):
		write_config(config_home / "home", "unlock = 'at-unlock'\n")
		with pytest.raises(unlockwatch.UserError, match="config function"):
			unlockwatch.config.load()

	def test_invalid_resolver(self, config_home):
		write_config(config_home / "home", "def config(c):\n\tc.resolve_session_by('guess')\n")
		with pytest.raises(unlockwatch.UserError, match="guess"):
			unlockwatch.config.load()

	def test_empty_command(self, config_home):
		write_config(config_home / "home", "def config(c):\n\tc.unlock_command()\n")
		with pytest.raises(unlockwatch.UserError, match="must not be empty"):
			unlockwatch.config.load()
