"""
JSON response used by every route: UTF-8, 2-space indent, open CORS.
"""
import json
from typing import Any

from fastapi.responses import JSONResponse

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}


class PrettyJSONResponse(JSONResponse):
    media_type = "application/json;charset=UTF-8"

    def __init__(self, content: Any, status_code: int = 200, headers: dict = None, **kwargs):
        super().__init__(content, status_code=status_code, headers={**CORS_HEADERS, **(headers or {})}, **kwargs)

    def render(self, content: Any) -> bytes:
        return json.dumps(content, ensure_ascii=False, indent=2).encode("utf-8")
