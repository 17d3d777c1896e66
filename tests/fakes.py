from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "") -> None:
        self.status_code = status_code
        self.text = text


def typesense_like(method: str, url: str, kwargs: Dict[str, Any]) -> FakeResponse:
    if url.endswith("/collections"):
        return FakeResponse(201, json.dumps(kwargs.get("json") or {}))
    if "/documents/import" in url:
        lines = (kwargs.get("data") or b"").decode("utf-8").splitlines()
        return FakeResponse(200, "\n".join('{"success":true}' for _ in lines))
    return FakeResponse(404, '{"message":"Not Found"}')


class FakeSession:
    """Stands in for requests.Session; records every call."""

    def __init__(self, handler: Optional[Callable[[str, str, Dict[str, Any]], FakeResponse]] = None) -> None:
        self.handler = handler or typesense_like
        self.calls: List[Dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        return self.handler(method, url, kwargs)

    def import_calls(self) -> List[Dict[str, Any]]:
        return [c for c in self.calls if "/documents/import" in c["url"]]

    def import_sizes(self) -> List[int]:
        return [len(c["data"].decode("utf-8").splitlines()) for c in self.import_calls()]
