import asyncio
import json
from types import SimpleNamespace

import pytest

from cloudlab.ai_engine import ModelResponse, parse_structured
from cloudlab.config import Settings


class StubClient:
    """
    Stands in for ModelClient. Records every request and replays a canned response.
    """

    def __init__(self, text="", citations=(), error=None, delay=0.0):
        self.text = text
        self.citations = list(citations)
        self.error = error
        self.delay = delay
        self.requests = []

    async def generate(self, request):
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return ModelResponse(text=self.text, citations=list(self.citations))

    async def generate_structured(self, request):
        response = await self.generate(request)
        return parse_structured(response.text, request.response_schema)


class FakeModels:
    """
    Mimics genai.Client().aio.models for ModelClient tests.
    """

    def __init__(self, response=None, error=None, delay=0.0):
        self.response = response
        self.error = error
        self.delay = delay
        self.calls = []

    async def generate_content(self, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response


def fake_genai(models):
    return SimpleNamespace(aio=SimpleNamespace(models=models))


def fake_response(text, web=(), maps=()):
    chunks = [SimpleNamespace(web=SimpleNamespace(title=t, uri=u), maps=None) for t, u in web]
    chunks += [SimpleNamespace(web=None, maps=SimpleNamespace(title=t, uri=u)) for t, u in maps]
    metadata = SimpleNamespace(grounding_chunks=chunks) if chunks else None
    return SimpleNamespace(text=text, candidates=[SimpleNamespace(grounding_metadata=metadata)])


# ── Payloads ─────────────────────────────────────────────────────────

SITE_AUDIT_PAYLOAD = {
    "domain": "example.com",
    "overallScore": 72,
    "summary": "ok",
    "resources": [
        {"title": "SEO", "score": 80, "status": "Good", "details": "d", "recommendation": "r"},
    ],
}

CLINICAL_AUDIT_PAYLOAD = {
    "doctorName": "Dr. Ana Souza",
    "specialty": "Cirurgia do Joelho",
    "overallHealth": 41,
    "clinicalSummary": "Paciente com mobilidade reduzida.",
    "triage": {
        "score": 35,
        "status": "CRITICAL",
        "diagnosis": "Articulação travada",
        "details": "LCP acima de 6s.",
    },
    "imaging": {
        "score": 55,
        "status": "AMATEUR",
        "observation": "Fotos de banco de imagem.",
        "detectedTags": ["Generic", "Stock"],
    },
    "marketXray": {
        "competitorComparison": "Dr. X domina a busca local.",
        "lostTerritory": "Pacientes de prótese migrando.",
    },
    "prescription": {
        "immediateAction": "Refazer a home com foco em prótese.",
        "adHeadlines": ["Dor no joelho?", "Prótese robótica", "Volte a caminhar"],
        "prognosis": "Reversível com gestão.",
    },
}


@pytest.fixture
def settings():
    return Settings(api_key="test-key", request_timeout=1.0)


@pytest.fixture
def site_audit_json():
    return json.dumps(SITE_AUDIT_PAYLOAD)


@pytest.fixture
def clinical_audit_json():
    return json.dumps(CLINICAL_AUDIT_PAYLOAD)
