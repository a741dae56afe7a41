from pathlib import Path

import pytest

from postgen.config import BlogConfig, load_config
from postgen.errors import ConfigurationError


def test_load_config_reads_yaml(tmp_path: Path):
    path = tmp_path / "blog.yaml"
    path.write_text(
        "apiEndpoint: https://repo.cdn.prismic.io/api/v2\n"
        "pageSize: 2\n"
        "comments:\n"
        "  repo: owner/comments\n",
        encoding="utf-8",
    )

    config = load_config(path, environ={})

    assert config.api_endpoint == "https://repo.cdn.prismic.io/api/v2"
    assert config.page_size == 2
    assert config.comments.repo == "owner/comments"
    assert config.comments.theme == "photon-dark"
    assert config.comments.active


def test_environment_overrides_file(tmp_path: Path):
    path = tmp_path / "blog.yaml"
    path.write_text("apiEndpoint: https://file.example/api/v2\n", encoding="utf-8")

    config = load_config(
        path,
        environ={"PRISMIC_API_ENDPOINT": "https://env.example/api/v2", "PRISMIC_ACCESS_TOKEN": "secret"},
    )

    assert config.api_endpoint == "https://env.example/api/v2"
    assert config.access_token == "secret"


def test_missing_explicit_file(tmp_path: Path):
    with pytest.raises(ConfigurationError):
        load_config(tmp_path / "nope.yaml", environ={})


@pytest.mark.parametrize("text", ["- not\n- a mapping\n", "pageSize: 0\n", "pageSize: [oops\n"])
def test_invalid_config(tmp_path: Path, text: str):
    path = tmp_path / "blog.yaml"
    path.write_text(text, encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_config(path, environ={})


def test_defaults_without_repo_disable_comments():
    config = BlogConfig()

    assert config.page_size == 4
    assert not config.comments.active
    with pytest.raises(ConfigurationError):
        config.require_endpoint()


def test_sample_config_is_valid():
    config = load_config(Path(__file__).parent.parent / "config" / "blog.yaml", environ={})

    assert config.site_title == "spacetraveling"
    assert config.comments.issue_term == "title"
