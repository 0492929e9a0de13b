"""
Place extraction from language-model output.

The model is asked to answer with a fenced JSON block describing the place
shown in a video. Responses are free text, so the block is located with a
regex (falling back to the first balanced ``{...}`` span) before parsing.
"""
import json
import re
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator

from app.utils.normalizers import parse_tags

FENCED_BLOCK_PATTERN = re.compile(
    r"```[ \t]*(?:json(?:schema)?)?[ \t]*\r?\n?(.*?)```",
    re.DOTALL | re.IGNORECASE,
)

_QUOTE_TRANSLATION = str.maketrans({
    "“": '"',
    "”": '"',
    "＂": '"',
})

EXTRACTION_PROMPT = """以下はショート動画の情報です。

Title: {title}
User: @{user}
Likes: {likes}, Plays: {views}
Tags: {tags}
URL: {url}

この動画で紹介されている場所を特定し、次の形式のJSONだけで返答してください:
```json
{{
  "name": "施設名・スポット名（不明なら空文字）",
  "area": "地名（市区町村など）",
  "address": "住所（分かる範囲で、不明なら空文字）",
  "category": "cafe / sightseeing / playground / restaurant / other のいずれか"
}}
```
"""


class PlaceExtractionError(ValueError):
    """The model output did not contain a usable place description."""


class PlaceCandidate(BaseModel):
    """Structured place data extracted from a model response."""
    name: Optional[str] = Field(None, validation_alias=AliasChoices("name", "place_name", "place"))
    area: Optional[str] = Field(None, validation_alias=AliasChoices("area", "located", "location"))
    address: Optional[str] = None
    category: Optional[str] = None

    @field_validator("name", "area", "address", "category", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @property
    def search_query(self) -> str:
        """Query string for place search: name and area when both are known."""
        return " ".join(part for part in (self.name, self.area) if part)


def build_extraction_prompt(place: Any) -> str:
    """Render the extraction prompt for a stored place (or any object with video fields)."""
    tags: List[str] = parse_tags(getattr(place, "tags", None))
    return EXTRACTION_PROMPT.format(
        title=getattr(place, "title", None) or "",
        user=getattr(place, "user_name", None) or "",
        likes=getattr(place, "likes", None) or 0,
        views=getattr(place, "views", None) or 0,
        tags=json.dumps(tags, ensure_ascii=False),
        url=getattr(place, "url", None) or "",
    )


def _first_object_span(text: str) -> Optional[str]:
    """Return the first balanced {...} span, ignoring braces inside strings."""
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start:index + 1]
        # Unbalanced from this brace; try the next one
        start = text.find("{", start + 1)
    return None


def extract_json_block(text: str) -> Dict[str, Any]:
    """
    Locate and decode the JSON object in a model response.

    Fenced code blocks are tried first, in order; then the first balanced
    object anywhere in the text.

    Raises:
        PlaceExtractionError: If no JSON object can be decoded
    """
    if not text or not text.strip():
        raise PlaceExtractionError("Empty model response")

    normalized = text.translate(_QUOTE_TRANSLATION)

    candidates: List[str] = []
    for match in FENCED_BLOCK_PATTERN.finditer(normalized):
        block = match.group(1)
        candidates.append(block)
        span = _first_object_span(block)
        if span and span != block.strip():
            candidates.append(span)
    span = _first_object_span(normalized)
    if span:
        candidates.append(span)

    for candidate in candidates:
        try:
            decoded = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(decoded, dict):
            return decoded

    raise PlaceExtractionError("No JSON object found in model response")


def parse_place_candidate(text: str) -> PlaceCandidate:
    """
    Extract a PlaceCandidate from a model response.

    Raises:
        PlaceExtractionError: If there is no JSON object, or it names neither
            a place nor an area
    """
    data = extract_json_block(text)
    try:
        candidate = PlaceCandidate.model_validate(data)
    except ValidationError as exc:
        raise PlaceExtractionError(f"Invalid place data: {exc}") from exc

    if not candidate.name and not candidate.area:
        raise PlaceExtractionError("Model response names neither a place nor an area")
    return candidate
