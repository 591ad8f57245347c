"""
Gemini Model Client
One request/response round trip per call: prompt (plus optional inline image), optional
response schema, optional search/maps grounding. No retries, no fallback chain, no caching.
"""

import asyncio
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Tuple

from google import genai
from google.genai import types
from pydantic import ValidationError

from cloudlab.config import Settings
from cloudlab.errors import MalformedResponse, RequestFailed

logger = logging.getLogger(__name__)

SEARCH = "search"
MAPS = "maps"

_TOOL_FACTORIES = {
    SEARCH: lambda: types.Tool(google_search=types.GoogleSearch()),
    MAPS: lambda: types.Tool(google_maps=types.GoogleMaps()),
}


@dataclass(frozen=True)
class InlineImage:
    data: bytes
    mime_type: str = "image/jpeg"


@dataclass(frozen=True)
class ModelRequest:
    contents: str
    image: Optional[InlineImage] = None
    system_instruction: Optional[str] = None
    response_schema: Optional[type] = None
    tools: Tuple[str, ...] = ()
    model: Optional[str] = None
    temperature: Optional[float] = None


@dataclass(frozen=True)
class Citation:
    title: str
    uri: str


@dataclass(frozen=True)
class ModelResponse:
    text: str
    citations: List[Citation] = field(default_factory=list)


class ModelBackend(Protocol):
    """
    What the task adapters need from a model client. Tests pass a stub.
    """

    async def generate(self, request: ModelRequest) -> ModelResponse: ...

    async def generate_structured(self, request: ModelRequest): ...


def _balanced_span(text, start_index):
    start_char = text[start_index]
    end_char = '}' if start_char == '{' else ']'
    depth = 0
    in_string = False
    escaped = False
    for i, char in enumerate(text[start_index:], start=start_index):
        if in_string:
            if escaped:
                escaped = False
            elif char == '\\':
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == start_char:
            depth += 1
        elif char == end_char:
            depth -= 1
            if depth == 0:
                return text[start_index:i + 1]

    return None


def iter_json_objects(text):
    """
    Yields every balanced `{...}` span in the text, in order of where it starts.
    Spans nested inside an earlier yielded span are skipped.
    """
    index = text.find('{')
    while index != -1:
        span = _balanced_span(text, index)
        if span is not None:
            yield span
            index = text.find('{', index + len(span))
        else:
            index = text.find('{', index + 1)


def extract_first_json_object(text):
    """
    Finds the first JSON object in the text using a stack-based approach, falling back to
    the first list when there is no object. Grounded responses often wrap the JSON in
    commentary and citation markers like [1], so we cannot json.loads the whole body.
    """
    text = text.strip()

    for span in iter_json_objects(text):
        return span

    first_bracket = text.find('[')
    if first_bracket == -1:
        return None
    return _balanced_span(text, first_bracket)


_WHOLE_FENCE = re.compile(r'\s*```(?:json)?\s*(.*?)\s*```\s*', re.DOTALL | re.IGNORECASE)


def _strip_code_fence(text):
    # Only a fence wrapping the whole body counts; backticks inside string values are content
    match = _WHOLE_FENCE.fullmatch(text)
    return match.group(1) if match else text


def _json_candidates(response_text):
    body = response_text.strip()
    yield body

    unfenced = _strip_code_fence(body)
    if unfenced != body:
        yield unfenced

    for span in iter_json_objects(unfenced):
        if span != unfenced:
            yield span


def parse_structured(response_text, schema):
    """
    Deserializes a model body into `schema` (a pydantic model class).

    The body is tried as-is first, then without a wrapping code fence, then each embedded
    JSON object in turn. Raises MalformedResponse for an empty body or when no candidate
    validates.
    """
    if not response_text or not response_text.strip():
        raise MalformedResponse("Empty response")

    error = None
    for candidate in _json_candidates(response_text):
        try:
            return schema.model_validate_json(candidate)
        except ValidationError as e:
            error = error or e

    logger.error("Structured parse failed for %s. Raw start: %s", schema.__name__, response_text[:200])
    raise MalformedResponse(f"Response does not match {schema.__name__}: {error.error_count()} error(s)") from error


def extract_citations(response):
    """
    Pulls (title, uri) pairs out of the first candidate's grounding metadata.
    Web and maps chunks share the same shape; untitled chunks are skipped.
    """
    citations = []
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return citations

    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []
    for chunk in chunks:
        source = getattr(chunk, "web", None) or getattr(chunk, "maps", None)
        title = getattr(source, "title", None)
        if title:
            citations.append(Citation(title=title, uri=getattr(source, "uri", None) or ""))
    return citations


def build_config(request):
    params = {}
    if request.system_instruction:
        params["system_instruction"] = request.system_instruction
    if request.temperature is not None:
        params["temperature"] = request.temperature

    tools = []
    for name in request.tools:
        if name not in _TOOL_FACTORIES:
            raise ValueError(f"Unknown tool capability: {name}")
        tools.append(_TOOL_FACTORIES[name]())
    if tools:
        params["tools"] = tools

    if request.response_schema is not None:
        params["response_mime_type"] = "application/json"
        params["response_schema"] = request.response_schema

    return types.GenerateContentConfig(**params) if params else None


def build_contents(request):
    if request.image is None:
        return request.contents
    return [
        types.Part.from_bytes(data=request.image.data, mime_type=request.image.mime_type),
        request.contents,
    ]


class ModelClient:
    """
    Credential-bound wrapper around google-genai. Construct one and pass it to the adapters.

    `client` lets callers hand in an already built genai.Client (or a fake exposing
    `aio.models.generate_content`).
    """

    def __init__(self, settings: Settings, client=None):
        self.settings = settings
        if client is None:
            if not settings.api_key:
                raise RequestFailed("GEMINI_API_KEY not found.")
            try:
                client = genai.Client(api_key=settings.api_key)
            except Exception as e:
                raise RequestFailed(f"Failed to initialize Client: {e}") from e
        self._client = client

    def resolve_model(self, request):
        """
        Explicit model wins; otherwise images go to the vision model and maps grounding
        to the maps model.
        """
        if request.model:
            return request.model
        if request.image is not None:
            return self.settings.vision_model
        if MAPS in request.tools:
            return self.settings.maps_model
        return self.settings.text_model

    async def generate(self, request: ModelRequest) -> ModelResponse:
        model = self.resolve_model(request)
        timeout = self.settings.request_timeout
        config = build_config(request)

        logger.debug(
            "generate_content model=%s tools=%s schema=%s image=%s",
            model,
            ",".join(request.tools) or "-",
            getattr(request.response_schema, "__name__", "-"),
            request.image.mime_type if request.image else "-",
        )

        try:
            response = await asyncio.wait_for(
                self._client.aio.models.generate_content(
                    model=model,
                    contents=build_contents(request),
                    config=config,
                ),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error("Model %s timed out after %ss", model, timeout)
            raise RequestFailed(f"{model} timed out after {timeout}s") from e
        except Exception as e:
            logger.error("Model %s request failed: %s", model, e)
            raise RequestFailed(f"{model} request failed: {e}") from e

        return ModelResponse(text=response.text or "", citations=extract_citations(response))

    async def generate_structured(self, request: ModelRequest):
        if request.response_schema is None:
            raise ValueError("generate_structured needs a response_schema")
        response = await self.generate(request)
        return parse_structured(response.text, request.response_schema)
