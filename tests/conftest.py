import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

DIRECTORY = {
    "response": [
        {"id": 1, "title": "News One", "stbNumber": "501", "category": "News"},
        {"id": 2, "title": "Sports Two", "stbNumber": "802", "category": "Sports"},
    ]
}


class _DirectoryHandler(BaseHTTPRequestHandler):
    def do_GET(self) -> None:  # noqa: N802 - http.server naming
        if self.path == "/all.json":
            self._send_body(json.dumps(DIRECTORY).encode("utf-8"))
        elif self.path == "/latin1.json":
            body = '{"response": [{"id": 7, "title": "Télé Sept"}]}'
            self._send_body(body.encode("latin-1"))
        elif self.path == "/truncated.json":
            self.send_response(200)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", "500")
            self.end_headers()
            self.wfile.write(b'{"response": [')
        elif self.path == "/error.json":
            self.send_error(500, "Internal Server Error")
        else:
            self.send_error(404)

    def _send_body(self, body: bytes) -> None:
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: object) -> None:
        pass


@pytest.fixture
def directory_server(monkeypatch):
    """Serve canned channel directory responses on a local port."""

    monkeypatch.setenv("no_proxy", "*")
    monkeypatch.setenv("NO_PROXY", "*")
    server = ThreadingHTTPServer(("127.0.0.1", 0), _DirectoryHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)
