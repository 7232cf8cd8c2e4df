"""Slack OAuth redirect endpoint: installs the app in a new workspace."""

from http.server import BaseHTTPRequestHandler
from urllib.parse import parse_qs, urlparse
import json
import logging

from slack_connector.services.slack_platform import get_slack_platform
from slack_connector.utils.logging import correlation_context
from slack_connector.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()
_logger = logging.getLogger(__name__)


class handler(BaseHTTPRequestHandler):
    """Serverless handler for GET /api/slack/oauth/redirect?code=<code>.

    Outcomes are reported in the JSON body with status 200:
    {"Message": "Installed!"} or {"Error": "<message>"}.
    """

    def _send_json(self, body: dict) -> None:
        self.send_response(200)
        self.send_header('Content-Type', 'application/json')
        self.end_headers()
        self.wfile.write(json.dumps(body).encode('utf-8'))

    def do_GET(self):
        """Handle the redirect Slack sends after the user approves the install."""
        with correlation_context():
            try:
                query = parse_qs(urlparse(self.path).query)
                code = (query.get("code") or [None])[0]
                if query.get("error"):
                    _logger.warning(f"Slack OAuth redirect carries an error: {query['error'][0]}")
                    self._send_json({"Error": f"Slack OAuth error: {query['error'][0]}"})
                    return

                result = get_slack_platform().handle_oauth_redirect(code)
                self._send_json(result)
            except Exception as e:
                _logger.error(f"Error processing Slack OAuth redirect: {e}", exc_info=True)
                self._send_json({"Error": str(e)})
