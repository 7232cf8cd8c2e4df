"""Test helper functions."""

import json
from io import BytesIO
from unittest.mock import Mock
from typing import Any, Dict

from slack_sdk.web import SlackResponse


def make_slack_response(data: Dict[str, Any], status_code: int = 200) -> SlackResponse:
    """Build a real SlackResponse around a payload."""
    return SlackResponse(
        client=None,
        http_verb="POST",
        api_url="https://slack.com/api/test",
        req_args={},
        data=data,
        headers={},
        status_code=status_code,
    )


class MockSocket:
    """Just enough of a socket to construct a BaseHTTPRequestHandler."""

    def __init__(self, request_line: bytes = b""):
        self.request_line = request_line

    def makefile(self, *args, **kwargs):
        return BytesIO(self.request_line)

    def sendall(self, data):
        pass

    def close(self):
        pass


def call_handler(handler_class, path: str, method: str = "GET") -> Dict[str, Any]:
    """Invoke a serverless handler for ``path`` and return status and JSON body."""
    # an empty request line keeps the constructor from dispatching on its own
    h = handler_class(MockSocket(), ("127.0.0.1", 8000), None)
    h.path = path
    h.wfile = BytesIO()
    h.send_response = Mock()
    h.send_header = Mock()
    h.end_headers = Mock()

    getattr(h, f"do_{method}")()

    h.wfile.seek(0)
    return {
        "statusCode": h.send_response.call_args[0][0],
        "headers": dict(c[0] for c in h.send_header.call_args_list),
        "body": json.loads(h.wfile.read().decode('utf-8')),
    }
