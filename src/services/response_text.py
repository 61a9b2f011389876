"""Plain-text extraction from generation responses.

Responses are classified into one of a few known shapes before any text is
read, so every shape has exactly one rendering rule:

* ``DirectText``     -- ``response.text`` is a string
* ``LazyText``       -- ``response.text`` is a zero-argument callable
* ``CandidateParts`` -- fragments under ``candidates[0].content.parts``,
  either on the response itself or wrapped in ``response.response``
* ``UnknownShape``   -- anything else; renders as ``""``

Both attribute access (SDK objects) and mapping access (decoded JSON) are
accepted.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class DirectText:
    text: str


@dataclass(frozen=True)
class LazyText:
    accessor: Callable[[], Any]


@dataclass(frozen=True)
class CandidateParts:
    parts: Sequence[Any]


@dataclass(frozen=True)
class UnknownShape:
    pass


ResponseShape = DirectText | LazyText | CandidateParts | UnknownShape


def get_field(obj: Any, name: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _first_candidate_parts(envelope: Any) -> Sequence[Any] | None:
    candidates = get_field(envelope, "candidates")
    if not candidates:
        return None
    parts = get_field(get_field(candidates[0], "content"), "parts")
    if isinstance(parts, (list, tuple)):
        return parts
    return None


def classify_response(response: Any) -> ResponseShape:
    if response is None:
        return UnknownShape()
    text = get_field(response, "text")
    if isinstance(text, str):
        return DirectText(text)
    if callable(text):
        return LazyText(text)
    parts = _first_candidate_parts(get_field(response, "response"))
    if parts is None:
        parts = _first_candidate_parts(response)
    if parts is not None:
        return CandidateParts(parts)
    return UnknownShape()


def render_text(shape: ResponseShape) -> str:
    if isinstance(shape, DirectText):
        return shape.text
    if isinstance(shape, LazyText):
        value = shape.accessor()
        return value if isinstance(value, str) else ""
    if isinstance(shape, CandidateParts):
        fragments = (get_field(part, "text") for part in shape.parts)
        return "\n".join(f for f in fragments if isinstance(f, str) and f)
    return ""


def extract_text(response: Any) -> str:
    return render_text(classify_response(response))
