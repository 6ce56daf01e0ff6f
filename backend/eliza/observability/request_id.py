from __future__ import annotations

import uuid
from typing import Optional

from fastapi import Request

REQUEST_ID_HEADER = "x-request-id"


def get_request_id(request: Optional[Request]) -> str:
    if request is None:
        return str(uuid.uuid4())
    rid = request.headers.get(REQUEST_ID_HEADER)
    if rid and rid.strip():
        return rid.strip()[:128]
    return str(uuid.uuid4())


__all__ = ["REQUEST_ID_HEADER", "get_request_id"]
