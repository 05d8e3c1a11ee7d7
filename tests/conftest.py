import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest


class _Handler(BaseHTTPRequestHandler):
    def do_GET(self):
        srv = self.server
        srv.requests.append({"path": self.path, "headers": dict(self.headers)})
        idx = min(len(srv.requests), len(srv.responses)) - 1
        status, body = srv.responses[idx]
        data = body.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def openapi_server():
    """
    serve((200, '{"paths": {}}'), ...) -> URL. Each request gets the next canned
    response; the last one repeats. `serve.requests` records what arrived.
    """
    servers = []

    def serve(*responses):
        srv = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
        srv.responses = list(responses)
        srv.requests = []
        threading.Thread(target=srv.serve_forever, daemon=True).start()
        servers.append(srv)
        serve.requests = srv.requests
        return f"http://127.0.0.1:{srv.server_address[1]}/openapi.json"

    yield serve
    for srv in servers:
        srv.shutdown()
        srv.server_close()


@pytest.fixture
def no_sleep(monkeypatch):
    """Record fetch backoff sleeps instead of waiting them out."""
    slept = []
    monkeypatch.setattr("openapi_snapshot.fetchers.http_fetcher.time.sleep", slept.append)
    return slept
