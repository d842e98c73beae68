import json
import threading
import time
from http.server import ThreadingHTTPServer, BaseHTTPRequestHandler
from typing import Self

from src.utils.crypto import verify_signature


class _WebhookHandler(BaseHTTPRequestHandler):
    """HTTP request handler for receiving webhooks."""

    def do_POST(self):
        content_length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(content_length)

        server_config = self.server.config  # type: ignore[attr-defined]

        with server_config["lock"]:
            server_config["request_count"] += 1
            scripted = server_config["response_sequence"]
            code = scripted.pop(0) if scripted else server_config["response_code"]

        # Simulate slow response
        if server_config["response_delay"] > 0:
            time.sleep(server_config["response_delay"])

        # Signature is checked over the raw bytes, before any parsing
        if server_config["signature_secret"] is not None:
            sig = self.headers.get("X-Webhook-Signature", "")
            if not sig:
                self._reply(401, {"error": "missing signature"})
                return
            if not verify_signature(body, server_config["signature_secret"], sig):
                self._reply(401, {"error": "invalid signature"})
                return

        try:
            payload = json.loads(body)
        except (json.JSONDecodeError, ValueError):
            self._reply(400, {"error": "invalid JSON"})
            return

        if not isinstance(payload, dict) or "event" not in payload or "data" not in payload:
            self._reply(400, {"error": "expected {event, data} envelope"})
            return

        with server_config["lock"]:
            server_config["received_events"].append({
                "delivery_id": self.headers.get("X-Webhook-Delivery-Id", ""),
                "event_type": self.headers.get("X-Webhook-Event", ""),
                "payload": payload,
                "body": body.decode("utf-8"),
                "headers": dict(self.headers),
            })

        if 200 <= code < 300:
            self._reply(code, {"status": "ok"})
        else:
            self._reply(code, {"error": f"simulated status {code}"})

    def _reply(self, code: int, body: dict) -> None:
        self.send_response(code)
        self.send_header("Content-Type", "application/json")
        if code == 204:
            self.end_headers()
            return
        data = json.dumps(body).encode()
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def log_message(self, format, *args):
        """Suppress default request logging."""
        pass


class SubscriberEndpointServer:
    """Configurable HTTP server that plays a webhook subscriber endpoint."""

    def __init__(self, host: str = "127.0.0.1", port: int = 0, secret: str | None = None):
        self._host = host
        self._port = port
        self._config = {
            "response_code": 200,
            "response_sequence": [],
            "response_delay": 0,
            "signature_secret": secret,
            "received_events": [],
            "request_count": 0,
            "lock": threading.Lock(),
        }
        self._server: ThreadingHTTPServer | None = None
        self._thread: threading.Thread | None = None

    def set_response_code(self, code: int) -> Self:
        self._config["response_code"] = code
        return self

    def set_response_sequence(self, codes: list[int]) -> Self:
        """Answer the next requests with `codes` in order, then fall back to the response code."""
        with self._config["lock"]:
            self._config["response_sequence"] = list(codes)
        return self

    def set_response_delay(self, seconds: float) -> Self:
        self._config["response_delay"] = seconds
        return self

    def enable_signature_verification(self, secret: str) -> Self:
        self._config["signature_secret"] = secret
        return self

    def start(self) -> None:
        self._server = ThreadingHTTPServer((self._host, self._port), _WebhookHandler)
        self._server.config = self._config  # type: ignore[attr-defined]
        # Get the actual port (useful when port=0)
        self._port = self._server.server_address[1]
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        if self._server:
            self._server.shutdown()
            self._server.server_close()
            self._server = None
        if self._thread:
            self._thread.join(timeout=5)
            self._thread = None

    @property
    def url(self) -> str:
        return f"http://{self._host}:{self._port}/webhook"

    @property
    def port(self) -> int:
        return self._port

    def get_received_events(self) -> list[dict]:
        with self._config["lock"]:
            return list(self._config["received_events"])

    def get_processed_count(self) -> int:
        with self._config["lock"]:
            return len(self._config["received_events"])

    def get_request_count(self) -> int:
        """Every POST seen, including ones rejected for signature or shape."""
        with self._config["lock"]:
            return self._config["request_count"]
