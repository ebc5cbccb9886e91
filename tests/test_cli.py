"""Тесты для CLI (`page_scout/cli.py`) с использованием click.testing.CliRunner.
Проверяют команды `discover`, `config`, `--version`, а также обработку ошибок.
"""
import asyncio
import json

import pytest
from click.testing import CliRunner

import page_scout.cli as cli_module
from page_scout.cli import cli
from page_scout.errors import FetchError
from page_scout.logger import configure
from page_scout.models import DiscoveryResult


@pytest.fixture(autouse=True)
def restore_logging():
    """CLI rebinds the log handler to CliRunner's stdout; rebind it back afterwards."""
    yield
    configure()


@pytest.fixture(autouse=True)
def patch_run_discovery(monkeypatch):
    """Патчим run_discovery, чтобы не ходить в сеть."""
    calls = []

    def fake_run(cfg, url, category):
        calls.append((cfg, url, category))
        return [DiscoveryResult(url=f"{url}/", category="home", status="200 OK")]

    monkeypatch.setattr(cli_module, "run_discovery", fake_run)
    return calls


@pytest.fixture()
def cfg_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(json.dumps({"timeout": 1.0, "run_timeout": 30}), encoding="utf-8")
    return path


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "PageScout" in result.output


def test_show_config(tmp_path):
    cfg_file = tmp_path / "default.yaml"
    cfg_file.write_text("timeout: 3\ncuration:\n  api_key: hidden-value\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["timeout"] == 3
    assert "hidden-value" not in result.output


def test_discover_stdout(cfg_file, patch_run_discovery):
    runner = CliRunner()
    result = runner.invoke(
        cli, ["--config", str(cfg_file), "discover", "https://example.com", "--category", "news"]
    )
    assert result.exit_code == 0
    output = json.loads(result.output)
    assert output == [{"url": "https://example.com/", "status": "200 OK", "category": "home"}]
    _, url, category = patch_run_discovery[0]
    assert (url, category) == ("https://example.com", "news")


def test_discover_json_file(cfg_file, tmp_path):
    out = tmp_path / "reports" / "pages.json"
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "discover", "https://example.com", "--json", str(out)])
    assert result.exit_code == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data[0]["url"] == "https://example.com/"


def test_discover_timeout_override(cfg_file, patch_run_discovery):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "discover", "https://example.com", "--timeout", "5"])
    assert result.exit_code == 0
    cfg, _, _ = patch_run_discovery[0]
    assert cfg.run_timeout == 5


def test_discover_error(monkeypatch, cfg_file):
    def failing(cfg, url, category):
        raise FetchError(f"{url}/sitemap.xml", "sitemap недоступен, HTTP 404", status=404)

    monkeypatch.setattr(cli_module, "run_discovery", failing)

    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "discover", "https://example.com"])
    assert result.exit_code == 1
    assert "HTTP 404" in result.output


def test_discover_timeout(monkeypatch, cfg_file):
    def slow(cfg, url, category):
        raise asyncio.TimeoutError

    monkeypatch.setattr(cli_module, "run_discovery", slow)

    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "discover", "https://example.com"])
    assert result.exit_code == 1
    assert "не завершено" in result.output


def test_bad_config_exits(tmp_path):
    cfg_file = tmp_path / "bad.yaml"
    cfg_file.write_text("timeout: -5", encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 1
    assert "Ошибка загрузки конфигурации" in result.output
