"""Best-effort extraction of a component payload from assistant text."""
from typing import Optional
import json
import re

from pydantic import BaseModel

# Outermost brace span; the model often wraps JSON in prose or code fences
_JSON_SPAN = re.compile(r"\{[\s\S]*\}")


class ComponentPayload(BaseModel):
    """Structured reply the system prompt asks the model for."""
    jsx: str
    css: str = ""
    explanation: str = ""


def parse_component_payload(text: str) -> Optional[ComponentPayload]:
    """
    Pull {jsx, css, explanation} out of a completed assistant reply.

    Free-form replies are common, so every failure mode returns None:
    no JSON object, invalid JSON, a non-object, or a missing/empty jsx.
    """
    if not text:
        return None

    match = _JSON_SPAN.search(text)
    if not match:
        return None

    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None

    if not isinstance(data, dict):
        return None

    jsx = data.get("jsx")
    if not isinstance(jsx, str) or not jsx.strip():
        return None

    css = data.get("css")
    explanation = data.get("explanation")
    return ComponentPayload(
        jsx=jsx,
        css=css if isinstance(css, str) else "",
        explanation=explanation if isinstance(explanation, str) else "",
    )
