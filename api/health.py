"""Health check endpoint."""

from http.server import BaseHTTPRequestHandler
import json

from slack_connector.services.slack_platform import get_slack_platform


class handler(BaseHTTPRequestHandler):
    """Health check handler for the serverless deployment."""

    def do_GET(self):
        """Handle GET request."""
        response = {"status": "ok", "service": "slack-connector"}
        try:
            platform = get_slack_platform()
            response["mode"] = platform.mode
            response["installed_workspaces"] = len(platform.registry.workspace_ids())
        except Exception as e:
            response["status"] = "degraded"
            response["error"] = str(e)

        self.send_response(200)
        self.send_header('Content-Type', 'application/json')
        self.end_headers()
        self.wfile.write(json.dumps(response).encode('utf-8'))

    def do_POST(self):
        """Handle POST request (same as GET for health check)."""
        self.do_GET()
