"""Request helpers shared by the JSON blueprints."""

from typing import Any, Dict

import bleach
from flask import current_app, request, session

from core.exceptions import ValidationError
from models.line_item import DraftState
from logging_config import ROLE_HEADER


DRAFT_SESSION_KEY = "draft"


def sanitize_text(text: Any, max_length: int = None) -> str:
    """Sanitize user input text."""
    if not text:
        return ""
    text = str(text).strip()
    text = bleach.clean(text, tags=[], strip=True)
    if max_length and len(text) > max_length:
        text = text[:max_length]
    return text


def json_body() -> Dict[str, Any]:
    """Request JSON object, or ValidationError if the body is not one."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def is_privileged() -> bool:
    """Whether the acting role may record entries that skip approval."""
    role = request.headers.get(ROLE_HEADER, "").strip().lower()
    return role in current_app.config.get("PRIVILEGED_ROLES", ())


def load_draft() -> DraftState:
    return DraftState.from_dict(session.get(DRAFT_SESSION_KEY))


def save_draft(draft: DraftState) -> None:
    session[DRAFT_SESSION_KEY] = draft.to_dict()
    session.modified = True
