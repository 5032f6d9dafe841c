import os

from pagegrab import FetchError
from pagegrab import __main__ as cli

from conftest import TORRENT_BODY


class StubFetcher:
    instances = []

    def __init__(self, timeout, device, headless):
        self.timeout = timeout
        self.device = device
        self.headless = headless
        StubFetcher.instances.append(self)

    def fetch(self, url):
        if "broken" in url:
            raise FetchError(f"could not download page {url}: boom")
        return f"<html><body>{url}</body></html>"


def test_fetch_command_prints_html(monkeypatch, capsys, tmp_path):
    StubFetcher.instances = []
    monkeypatch.setattr(cli, "PageFetcher", StubFetcher)

    code = cli.main(["-c", str(tmp_path / "none.yaml"), "fetch", "https://example.com/", "--timeout", "7"])

    assert code == 0
    assert capsys.readouterr().out == "<html><body>https://example.com/</body></html>"
    assert StubFetcher.instances[0].timeout == 7
    assert StubFetcher.instances[0].device == "Pixel 2 XL"


def test_fetch_command_writes_output_file(monkeypatch, tmp_path):
    monkeypatch.setattr(cli, "PageFetcher", StubFetcher)
    output = tmp_path / "page.html"

    code = cli.main(["-c", str(tmp_path / "none.yaml"), "fetch", "https://example.com/", "-o", str(output)])

    assert code == 0
    assert output.read_text(encoding="utf-8") == "<html><body>https://example.com/</body></html>"


def test_fetch_command_fails_on_fetch_error(monkeypatch, capsys, tmp_path):
    monkeypatch.setattr(cli, "PageFetcher", StubFetcher)

    code = cli.main(["-c", str(tmp_path / "none.yaml"), "fetch", "https://broken.example.com/"])

    assert code == 1
    assert "could not download page" in capsys.readouterr().err


def test_download_command_prints_path(base_url, capsys, tmp_path):
    code = cli.main([
        "-c", str(tmp_path / "none.yaml"),
        "download", f"{base_url}/file.torrent", "monte cristo", "-d", str(tmp_path),
    ])

    assert code == 0
    path = capsys.readouterr().out.strip()
    assert os.path.dirname(path) == str(tmp_path)
    with open(path, "rb") as f:
        assert f.read() == TORRENT_BODY


def test_download_command_runs_bypass_first(monkeypatch, file_server, base_url, tmp_path):
    calls = []

    class StubBypasser:
        def __init__(self, user_agent):
            self.user_agent = user_agent

        def bypass(self, url, session):
            calls.append((url, self.user_agent))
            session.cookies.set("cf_clearance", "solved", domain="127.0.0.1", path="/")
            return session

    monkeypatch.setattr(cli, "ChallengeBypasser", StubBypasser)
    config = tmp_path / "pagegrab.yaml"
    config.write_text("settings:\n  user_agent: TestAgent/1.0\n")

    code = cli.main([
        "-c", str(config),
        "download", f"{base_url}/file.torrent", "x", "--bypass", f"{base_url}/", "-d", str(tmp_path),
    ])

    assert code == 0
    assert calls == [(f"{base_url}/", "TestAgent/1.0")]
    _, headers = file_server.requests_seen[-1]
    assert headers["User-Agent"] == "TestAgent/1.0"
    assert "cf_clearance=solved" in headers["Cookie"]


def test_download_command_fails_on_404(base_url, capsys, tmp_path):
    code = cli.main([
        "-c", str(tmp_path / "none.yaml"),
        "download", f"{base_url}/missing.torrent", "x", "-d", str(tmp_path),
    ])

    assert code == 1
    assert "status code error: 404" in capsys.readouterr().err


def test_invalid_config_exits_with_error(tmp_path):
    config = tmp_path / "pagegrab.yaml"
    config.write_text("settings:\n  timeout: -1\n")

    assert cli.main(["-c", str(config), "fetch", "https://example.com/"]) == 1


def test_fetch_command_rejects_non_positive_timeout(monkeypatch, capsys, tmp_path):
    StubFetcher.instances = []
    monkeypatch.setattr(cli, "PageFetcher", StubFetcher)

    for value in ("0", "-3"):
        code = cli.main(["-c", str(tmp_path / "none.yaml"), "fetch", "https://example.com/", "--timeout", value])

        assert code == 1
        assert "--timeout must be greater than zero" in capsys.readouterr().err

    assert StubFetcher.instances == []
