import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest
import requests

TORRENT_BODY = b"d8:announce35:udp://tracker.example.org:1337/announce4:infod4:name8:book.epubee"


class FileHandler(BaseHTTPRequestHandler):
    def do_GET(self):
        self.server.requests_seen.append((self.path, dict(self.headers)))

        if self.path == "/file.torrent":
            self.send_response(200)
            self.send_header("Content-Type", "application/x-bittorrent")
            self.send_header("Content-Length", str(len(TORRENT_BODY)))
            self.end_headers()
            self.wfile.write(TORRENT_BODY)
        elif self.path == "/truncated.torrent":
            self.send_response(200)
            self.send_header("Content-Type", "application/x-bittorrent")
            self.send_header("Content-Length", "1000")
            self.end_headers()
            self.wfile.write(TORRENT_BODY[:10])
            self.wfile.flush()
            self.close_connection = True
        else:
            body = b"not found"
            self.send_response(404)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture(autouse=True)
def no_proxy_env(monkeypatch):
    for name in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def file_server():
    server = ThreadingHTTPServer(("127.0.0.1", 0), FileHandler)
    server.requests_seen = []
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)


@pytest.fixture
def base_url(file_server):
    host, port = file_server.server_address[:2]
    return f"http://{host}:{port}"


@pytest.fixture
def session():
    with requests.Session() as s:
        yield s
