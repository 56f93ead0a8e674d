"""Shared fixtures: an in-process npm-style registry and store helpers."""

from __future__ import annotations

import http.server
import io
import json
import socket
import tarfile
import threading
from pathlib import Path
from typing import Any, Dict, Iterator
from urllib.parse import unquote, urlparse

import pytest

from hpm_core.store import StoreLayout


def make_tarball(files: Dict[str, str | bytes]) -> bytes:
    """Build a gzip tarball in memory, npm style (members under ``package/``)."""

    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tf:
        for rel, content in files.items():
            data = content.encode("utf-8") if isinstance(content, str) else content
            info = tarfile.TarInfo(name=f"package/{rel}")
            info.size = len(data)
            info.mode = 0o644
            tf.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


class MockRegistryState:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.documents: Dict[str, Any] = {}
        self.raw_documents: Dict[str, bytes] = {}
        self.tarballs: Dict[str, bytes] = {}
        self.requests: list[str] = []

    def record(self, path: str) -> None:
        with self._lock:
            self.requests.append(path)


class _MockRegistryRequestHandler(http.server.BaseHTTPRequestHandler):
    protocol_version = "HTTP/1.1"

    def _state(self) -> MockRegistryState:
        return self.server.state  # type: ignore[attr-defined]

    def _write(self, status: int, data: bytes, content_type: str) -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def do_GET(self) -> None:
        path = unquote(urlparse(self.path).path)
        state = self._state()
        state.record(path)
        if path in state.tarballs:
            self._write(200, state.tarballs[path], "application/octet-stream")
            return
        name = path.lstrip("/")
        if name in state.raw_documents:
            self._write(200, state.raw_documents[name], "application/json")
            return
        if name in state.documents:
            self._write(200, json.dumps(state.documents[name]).encode("utf-8"), "application/json")
            return
        self._write(404, b'{"error":"Not found"}', "application/json")

    def log_message(self, *_: Any) -> None:  # pragma: no cover - avoid noisy logs
        return


class _ThreadingHTTPServer(http.server.ThreadingHTTPServer):
    allow_reuse_address = True
    daemon_threads = True


class MockRegistryServer:
    """Runs the mock registry in a background thread."""

    def __init__(self) -> None:
        self.state = MockRegistryState()
        self.httpd = _ThreadingHTTPServer(("127.0.0.1", 0), _MockRegistryRequestHandler)
        self.httpd.state = self.state  # type: ignore[attr-defined]
        self.thread = threading.Thread(target=self.httpd.serve_forever, daemon=True)
        self.url = ""

    def start(self) -> None:
        self.thread.start()
        host, port = self.httpd.server_address[:2]
        self.url = f"http://{host}:{port}"

    def stop(self) -> None:
        self.httpd.shutdown()
        self.thread.join(timeout=2)
        self.httpd.server_close()

    def tarball_url(self, name: str, version: str) -> str:
        base = name.split("/")[-1]
        return f"{self.url}/{name}/-/{base}-{version}.tgz"

    def publish(
        self,
        name: str,
        version: str,
        files: Dict[str, str | bytes] | None = None,
        *,
        data: bytes | None = None,
    ) -> str:
        """Publish ``version`` as latest and return its tarball URL."""

        url = self.tarball_url(name, version)
        payload = data if data is not None else make_tarball(files or {"index.js": "module.exports = 1;\n"})
        self.state.tarballs[urlparse(url).path] = payload
        document = self.state.documents.setdefault(
            name, {"name": name, "dist-tags": {}, "versions": {}}
        )
        document["dist-tags"]["latest"] = version
        document["versions"][version] = {"name": name, "version": version, "dist": {"tarball": url}}
        return url


@pytest.fixture
def registry() -> Iterator[MockRegistryServer]:
    server = MockRegistryServer()
    server.start()
    try:
        yield server
    finally:
        server.stop()


@pytest.fixture
def closed_port_url() -> str:
    """A URL on localhost that refuses connections."""

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return f"http://127.0.0.1:{port}"


@pytest.fixture
def layout(tmp_path: Path) -> StoreLayout:
    return StoreLayout.from_root(tmp_path / "store")
