"""Remember who the operator is between portal visits.

The name and phone from the last submission are kept in a plain cookie so
the next form comes pre-filled. Failing to read or write it never blocks a
submission.
"""

from __future__ import annotations

import json
from dataclasses import dataclass

from django.conf import settings
from django.http import HttpRequest, HttpResponse


@dataclass(frozen=True)
class OperatorIdentity:
    name: str
    phone: str = ""

    def as_initial(self) -> dict[str, str]:
        return {"operator_name": self.name, "operator_phone": self.phone}


def get_operator_prefill(request: HttpRequest) -> OperatorIdentity | None:
    raw = request.COOKIES.get(settings.OPERATOR_COOKIE_NAME)
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(data, dict) or not data.get("name"):
        return None
    return OperatorIdentity(name=str(data["name"]), phone=str(data.get("phone") or ""))


def remember_operator(response: HttpResponse, name: str, phone: str = "") -> None:
    if not name:
        return
    response.set_cookie(
        settings.OPERATOR_COOKIE_NAME,
        json.dumps({"name": name, "phone": phone or ""}),
        max_age=settings.OPERATOR_COOKIE_MAX_AGE,
        samesite="Lax",
        secure=not settings.DEBUG,
        httponly=False,
    )
