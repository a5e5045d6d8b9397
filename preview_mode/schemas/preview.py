# preview_mode/schemas/preview.py
from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Union

from pydantic import BaseModel, Field

ORIGINAL_URL_HEADER = "x-original-url"


class PreviewRequest(BaseModel):
    original_path: str | None = None
    post_id: str | None = None
    post_slug: str | None = None

    @classmethod
    def from_query(cls, query: Mapping[str, Any], original_path: str | None = None) -> "PreviewRequest":
        """Query de la función (`postid`, `postslug`) -> PreviewRequest. Vacíos cuentan como ausentes."""
        post_id = query.get("postid")
        post_slug = query.get("postslug")
        return cls(
            original_path=original_path,
            post_id=str(post_id) if post_id not in (None, "") else None,
            post_slug=str(post_slug) if post_slug not in (None, "") else None,
        )

    def to_query(self) -> Dict[str, str]:
        q: Dict[str, str] = {}
        if self.post_id:
            q["postid"] = self.post_id
        if self.post_slug:
            q["postslug"] = self.post_slug
        return q


class FunctionRequest(BaseModel):
    """Lo único que la función necesita del host: headers y query."""

    # valores tal como los manda el host; se pasan a str al leerlos
    headers: Dict[str, Any] = Field(default_factory=dict)
    query: Dict[str, Any] = Field(default_factory=dict)

    def header(self, name: str) -> str | None:
        name = name.lower()
        for k, v in self.headers.items():
            if str(k).lower() == name:
                return str(v) if v is not None else None
        return None

    def to_preview_request(self) -> PreviewRequest:
        return PreviewRequest.from_query(self.query, original_path=self.header(ORIGINAL_URL_HEADER))


class FunctionResponse(BaseModel):
    status_code: int = 200
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Union[bytes, str] = ""
    is_raw: bool = False

    @classmethod
    def error(cls, status_code: int, message: str) -> "FunctionResponse":
        return cls(
            status_code=status_code,
            headers={"Content-Type": "application/json"},
            body=json.dumps({"error": message}, indent=2),
        )

    def as_dict(self) -> Dict[str, Any]:
        """Forma de respuesta de funciones tipo Azure (`context.res`)."""
        if self.is_raw:
            return {"isRaw": True, "headers": dict(self.headers), "body": self.body}
        return {"statusCode": self.status_code, "headers": dict(self.headers), "body": self.body}
