import json
from types import SimpleNamespace

import pytest

from sentinel_scanner.core import config as config_module  # type: ignore[import]
from tests.helpers.sentinel_imports import CrawlResult, Finding, cli


@pytest.fixture(autouse=True)
def _quiet_environment(monkeypatch):
    monkeypatch.setattr(config_module, "load_dotenv", lambda: None)
    monkeypatch.setattr(cli, "configure_logging", lambda verbose=False: None)


class FakeSpider:
    instances = []

    def __init__(self, config):
        self.config = config
        self.runtime_state = SimpleNamespace(depth=2)
        FakeSpider.instances.append(self)

    def scan(self):
        return CrawlResult(seed=self.config.seed, urls=[self.config.seed, "https://a.test/x"])


def _spider_results(tmp_path, urls):
    path = tmp_path / "spider.json"
    path.write_text(json.dumps({"seed": "https://a.test/", "urls": urls}), encoding="utf-8")
    return path


def test_spider_command_writes_results(monkeypatch, tmp_path, capsys):
    FakeSpider.instances.clear()
    monkeypatch.setattr(cli, "Spider", FakeSpider)
    output = tmp_path / "out.json"

    exit_code = cli.run_cli(
        ["spider", "-u", "https://a.test/", "-d", "3", "-c", "5", "--include-external", "-o", str(output)]
    )

    assert exit_code == 0
    config = FakeSpider.instances[0].config
    assert (config.max_depth, config.concurrency, config.ignore_external_links) == (3, 5, False)
    assert json.loads(output.read_text(encoding="utf-8"))["urls"] == [
        "https://a.test/",
        "https://a.test/x",
    ]
    assert "Resultados salvos" in capsys.readouterr().out


@pytest.mark.parametrize(
    "argv",
    [
        ["spider", "-u", "ftp://a.test/"],
        ["spider", "-u", "https://a.test/", "-d", "0"],
        ["spider", "-u", "https://a.test/", "-c", "31"],
        ["spider", "-u", "https://a.test/", "-o", "results.txt"],
        ["ports", "-s", "missing.json"],
        [],
    ],
)
def test_invalid_arguments_exit_with_usage_error(argv):
    with pytest.raises(SystemExit) as excinfo:
        cli.run_cli(argv)

    assert excinfo.value.code == 2


def test_existing_output_file_is_refused(tmp_path):
    output = tmp_path / "out.json"
    output.write_text("{}", encoding="utf-8")

    with pytest.raises(SystemExit):
        cli.run_cli(["spider", "-u", "https://a.test/", "-o", str(output)])


def test_ports_command_saves_findings(monkeypatch, tmp_path):
    captured = {}

    def fake_run_port_scanner(crawl, **kwargs):
        captured["crawl"] = crawl
        captured.update(kwargs)
        return [Finding(type="High", severity=7.2, url="a.test:2222", description="SSH")]

    monkeypatch.setattr(cli, "run_port_scanner", fake_run_port_scanner)
    results = _spider_results(tmp_path, ["https://a.test/"])
    output = tmp_path / "ports.json"

    exit_code = cli.run_cli(
        ["ports", "-s", str(results), "--to-port", "3000", "--allow-list", "22", "-o", str(output)]
    )

    assert exit_code == 0
    assert captured["crawl"].urls == ["https://a.test/"]
    assert captured["allow_list"] == [22]
    assert (captured["from_port"], captured["to_port"]) == (1, 3000)
    assert json.loads(output.read_text(encoding="utf-8"))[0]["url"] == "a.test:2222"


def test_malformed_spider_results_fail_cleanly(tmp_path, capsys):
    results = tmp_path / "spider.json"
    results.write_text("[1, 2, 3]", encoding="utf-8")

    exit_code = cli.run_cli(["headers", "-s", str(results), "-o", str(tmp_path / "h.json")])

    assert exit_code == 1
    assert "[!]" in capsys.readouterr().err
    assert not (tmp_path / "h.json").exists()


def test_unexpected_errors_return_failure(monkeypatch, tmp_path):
    def explode(crawl, **kwargs):
        raise RuntimeError("scanner crashed")

    monkeypatch.setattr(cli, "run_header_scanner", explode)
    results = _spider_results(tmp_path, ["https://a.test/"])

    assert cli.run_cli(["headers", "-s", str(results), "-o", str(tmp_path / "h.json")]) == 1


def test_default_output_path_is_created_under_output_dir(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    path = cli.default_output_path("spider")

    assert path.parent == tmp_path / cli.DEFAULT_OUTPUT_DIR
    assert path.parent.is_dir()
    assert path.name.startswith("spider_") and path.suffix == ".json"
