import socket
import threading

import pytest
from werkzeug.serving import make_server

from test_server.echo_server import app


@pytest.fixture(scope="session")
def echo_server():
    """Base URL of the Flask echo server running in a background thread"""
    server = make_server("127.0.0.1", 0, app, threaded=True)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_port}"
    server.shutdown()
    thread.join()


@pytest.fixture
def closed_port():
    # Bound then released, so nothing is listening there
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]
