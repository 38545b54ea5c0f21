"""ASGI middleware that adds collected styles to HTML responses."""
from typing import List, Optional

from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from cssforge.engine import Engine
from cssforge.server import inject_styles


class StyleInjectionMiddleware:
    """
    Buffers text/html responses and injects the engine's <style> element
    before </head>. Other responses pass through untouched.
    """

    def __init__(self, app: ASGIApp, engine: Optional[Engine] = None, nonce: Optional[str] = None):
        self.app = app
        self.engine = engine
        self.nonce = nonce

    def _engine(self) -> Engine:
        if self.engine is not None:
            return self.engine
        from cssforge import default_engine

        return default_engine

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start_message: Optional[Message] = None
        body_parts: List[bytes] = []
        is_html = False

        async def send_wrapper(message: Message) -> None:
            nonlocal start_message, is_html

            if message["type"] == "http.response.start":
                headers = MutableHeaders(raw=message["headers"])
                # Compressed bodies cannot be edited as text
                is_html = headers.get("content-type", "").startswith("text/html") and "content-encoding" not in headers
                if not is_html:
                    await send(message)
                    return
                start_message = message
                return

            if message["type"] != "http.response.body" or not is_html or start_message is None:
                await send(message)
                return

            body_parts.append(message.get("body", b""))
            if message.get("more_body", False):
                return

            body = b"".join(body_parts)
            headers = MutableHeaders(raw=start_message["headers"])
            charset = _charset(headers.get("content-type", ""))
            try:
                document = body.decode(charset)
                body = inject_styles(document, self._engine(), nonce=self.nonce).encode(charset)
            except (LookupError, UnicodeError):
                # Unknown charset or undecodable body: send the original bytes
                pass

            headers["content-length"] = str(len(body))
            start_message["headers"] = headers.raw
            await send(start_message)
            await send({"type": "http.response.body", "body": body, "more_body": False})

        await self.app(scope, receive, send_wrapper)

    def __getattr__(self, name):
        return getattr(self.app, name)


def _charset(content_type: str) -> str:
    """Return the charset parameter of a content-type header (utf-8 if absent)."""
    for param in content_type.split(";")[1:]:
        name, _, value = param.partition("=")
        if name.strip().lower() == "charset" and value.strip():
            return value.strip().strip('"')
    return "utf-8"
