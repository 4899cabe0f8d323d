"""Tests for configuration sources and the command line."""

from __future__ import annotations

import os

import pytest

from mdsite.cli import main
from mdsite.config import env_key, load_config, load_env_file, lookup, parse_env_file


@pytest.fixture
def clean_env(monkeypatch) -> dict:
    env = {key: value for key, value in os.environ.items() if not key.startswith("MDSITE_")}
    monkeypatch.setattr(os, "environ", env)
    return env


def test_load_config_formats(tmp_path) -> None:
    toml_path = tmp_path / "site.toml"
    toml_path.write_text('site_title = "Toml"\nper_page = 5\n', encoding="utf-8")
    yaml_path = tmp_path / "site.yaml"
    yaml_path.write_text("site_title: Yaml\nforce: true\n", encoding="utf-8")
    json_path = tmp_path / "site.json"
    json_path.write_text('{"site_title": "Json"}', encoding="utf-8")

    assert load_config(toml_path) == {"site_title": "Toml", "per_page": 5}
    assert load_config(yaml_path) == {"site_title": "Yaml", "force": True}
    assert load_config(json_path) == {"site_title": "Json"}
    assert load_config(tmp_path / "missing.toml") == {}


def test_load_config_rejects_non_mapping(tmp_path, capsys) -> None:
    path = tmp_path / "site.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        load_config(path)

    assert excinfo.value.code == 1
    assert "must be a mapping" in capsys.readouterr().err


def test_parse_env_file() -> None:
    text = '# comment\nMDSITE_SITE_TITLE="Quoted Title"\n\nMDSITE_PER_PAGE = 4\nnot a pair\nEMPTY=\n'

    assert parse_env_file(text) == {
        "MDSITE_SITE_TITLE": "Quoted Title",
        "MDSITE_PER_PAGE": "4",
        "EMPTY": "",
    }


def test_env_file_never_overrides_environment(tmp_path) -> None:
    path = tmp_path / ".env"
    path.write_text("MDSITE_OUTPUT=from-file\nMDSITE_CACHE=cache-file\n", encoding="utf-8")
    environ = {"MDSITE_OUTPUT": "from-env"}

    loaded = load_env_file(path, environ)

    assert loaded == {"MDSITE_CACHE": "cache-file"}
    assert environ == {"MDSITE_OUTPUT": "from-env", "MDSITE_CACHE": "cache-file"}
    assert load_env_file(tmp_path / "absent.env", environ) == {}


def test_lookup_prefers_environment() -> None:
    config = {"per_page": 10, "suffix": ".htm"}
    environ = {env_key("per_page"): "3"}

    assert env_key("base_url") == "MDSITE_BASE_URL"
    assert lookup(config, "per_page", environ) == "3"
    assert lookup(config, "suffix", environ) == ".htm"
    assert lookup(config, "missing", environ) is None


def test_cli_precedence(tree, clean_env, capsys) -> None:
    tree.post("one", "# One\n", age=20)
    tree.post("two", "# Two\n", age=10)
    config = tree.root / "site.toml"
    config.write_text(
        'site_title = "Config Title"\n'
        'site_description = "Config description"\n'
        'base_url = "https://config.example"\n'
        "per_page = 1\n",
        encoding="utf-8",
    )
    dotenv = tree.root / ".env"
    dotenv.write_text(
        "MDSITE_SITE_DESCRIPTION=Dotenv description\nMDSITE_BASE_URL=https://dotenv.example\n",
        encoding="utf-8",
    )
    clean_env["MDSITE_BASE_URL"] = "https://env.example"

    main(
        [
            "--config", str(config),
            "--env", str(dotenv),
            "-i", str(tree.pages),
            "-o", str(tree.output),
            "--cache", str(tree.cache),
            "--site-title", "CLI Title",
            "--quiet",
        ]
    )

    index = tree.read("index.html")
    assert "CLI Title" in index
    assert "Config Title" not in index
    assert "Dotenv description" in index
    assert 'href="https://env.example/index.html"' in index
    assert (tree.output / "index-2.html").is_file()
    out = capsys.readouterr().out
    assert "Built: 0 pages, 2 posts, 2 lists (2 sources changed)" in out
    assert "Build completed in" in out


def test_cli_reports_build_errors(tree, clean_env, capsys) -> None:
    tree.post("news", "# News\n")
    tree.tag("news", ["news"])

    with pytest.raises(SystemExit) as excinfo:
        main(
            [
                "--config", str(tree.root / "none.toml"),
                "--env", str(tree.root / "none.env"),
                "-i", str(tree.pages),
                "-o", str(tree.output),
                "--cache", str(tree.cache),
            ]
        )

    assert excinfo.value.code == 1
    assert "same name as tag" in capsys.readouterr().err
