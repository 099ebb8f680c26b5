"""Pytest configuration and fixtures for CLI tests."""

import pytest
import yaml
from click.testing import CliRunner

from mediatags.cli.main import cli

SAMPLE_OUTLINE = {
    "tags": ["Favorite"],
    "collections": [
        {
            "name": "Animals",
            "tags": ["Cat", "Dog"],
            "collections": [{"name": "Birds", "tags": ["Owl"]}],
        },
        {"name": "Places"},
    ],
}


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user and project config files out of CLI tests."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv("MEDIATAGS_NO_COLOR", raising=False)
    monkeypatch.delenv("MEDIATAGS_WIDTH", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def cli_runner():
    """Click CLI test runner invoking the mediatags group."""

    class MediaTagsCliRunner(CliRunner):
        def invoke(self, args, **kwargs):  # type: ignore
            if isinstance(args, list):
                return super().invoke(cli, args, **kwargs)
            return super().invoke(args, **kwargs)

    return MediaTagsCliRunner()


@pytest.fixture
def outline_file(tmp_path):
    """Outline with a root tag, a nested collection and an empty one."""
    path = tmp_path / "outline.yaml"
    path.write_text(yaml.safe_dump(SAMPLE_OUTLINE))
    return path
