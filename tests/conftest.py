import json
import socket
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from asum.summarizer import AIConfig


PROXY_VARS = ("http_proxy", "HTTP_PROXY", "https_proxy", "HTTPS_PROXY", "all_proxy", "ALL_PROXY")


class _ScriptedHandler(BaseHTTPRequestHandler):
    """Answers each POST with the next scripted (status, body[, delay]) entry."""

    def do_POST(self):  # noqa: N802 - http.server naming
        length = int(self.headers.get('Content-Length', 0))
        raw = self.rfile.read(length).decode('utf-8')
        self.server.requests.append({
            "path": self.path,
            "headers": dict(self.headers),
            "json": json.loads(raw) if raw else None,
        })

        responses = self.server.responses
        entry = responses.pop(0) if len(responses) > 1 else responses[0]
        status, body, *rest = entry
        if rest:
            time.sleep(rest[0])

        data = body if isinstance(body, str) else json.dumps(body)
        encoded = data.encode('utf-8')
        try:
            self.send_response(status)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(encoded)))
            self.end_headers()
            self.wfile.write(encoded)
        except (BrokenPipeError, ConnectionResetError):
            pass

    def log_message(self, format, *args):
        pass


class FakeServer:
    def __init__(self):
        self._httpd = ThreadingHTTPServer(("127.0.0.1", 0), _ScriptedHandler)
        self._httpd.daemon_threads = True
        self._httpd.requests = []
        self._httpd.responses = [(200, {})]
        self._thread = threading.Thread(target=self._httpd.serve_forever, daemon=True)

    @property
    def url(self) -> str:
        host, port = self._httpd.server_address[:2]
        return f"http://{host}:{port}"

    @property
    def requests(self) -> list[dict]:
        return self._httpd.requests

    def respond(self, *responses) -> None:
        """Queue responses; the last one repeats once the queue runs out."""
        self._httpd.responses = list(responses)

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._httpd.shutdown()
        self._httpd.server_close()


@pytest.fixture
def fake_server(monkeypatch):
    """Local HTTP server with scripted JSON responses."""
    for var in PROXY_VARS:
        monkeypatch.delenv(var, raising=False)
    server = FakeServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture
def closed_port_url():
    """URL of a port with nothing listening."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return f"http://127.0.0.1:{port}"


@pytest.fixture
def make_ai_config():
    """Return a factory for AIConfig with test defaults."""
    def _make(**overrides) -> AIConfig:
        values = dict(
            model="llama3",
            temperature=0.7,
            top_p=1.0,
            num_predict=100,
            system_prompt="sys",
            user_prompt="Changes: {{diff}}",
            timeout=5.0,
        )
        values.update(overrides)
        return AIConfig(**values)
    return _make
