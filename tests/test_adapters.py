"""Tests for the task adapters against a stubbed model client."""

import pytest

from cloudlab import adapters
from cloudlab.adapters import TextTask
from cloudlab.ai_engine import MAPS, SEARCH, Citation, InlineImage
from cloudlab.errors import EmptyInput, MalformedResponse, RequestFailed
from cloudlab.reports import AuditKind, ClinicalAuditReport, MarketData, SiteAuditReport

from conftest import CLINICAL_AUDIT_PAYLOAD, SITE_AUDIT_PAYLOAD, StubClient


# ── Empty input ──────────────────────────────────────────────────────

class TestEmptyInput:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("call", [
        lambda c: adapters.process_text_analysis(c, "", TextTask.TRANSLATE),
        lambda c: adapters.process_text_analysis(c, "   ", TextTask.QA),
        lambda c: adapters.simulate_api(c, "Web Risk API", ""),
        lambda c: adapters.perform_live_search(c, ""),
        lambda c: adapters.perform_maps_query(c, None),
        lambda c: adapters.generate_market_data(c, ""),
        lambda c: adapters.generate_site_audit(c, ""),
        lambda c: adapters.generate_clinical_audit(c, " "),
        lambda c: adapters.analyze_image(c, None),
        lambda c: adapters.analyze_image(c, InlineImage(b"")),
    ])
    async def test_raises_without_network_call(self, call):
        client = StubClient(text="should not be used")
        with pytest.raises(EmptyInput):
            await call(client)
        assert client.requests == []


# ── Text adapters ────────────────────────────────────────────────────

class TestTextAnalysis:
    @pytest.mark.asyncio
    async def test_translate_prompt(self):
        client = StubClient(text="Hola")
        result = await adapters.process_text_analysis(client, "Hello", TextTask.TRANSLATE, "Spanish")

        assert result == "Hola"
        request = client.requests[0]
        assert "Cloud Translation API" in request.system_instruction
        assert "to Spanish" in request.contents
        assert '"Hello"' in request.contents

    @pytest.mark.asyncio
    async def test_translate_defaults_to_english(self):
        client = StubClient(text="Hello")
        await adapters.process_text_analysis(client, "Hola", "TRANSLATE")
        assert "to English" in client.requests[0].contents

    @pytest.mark.parametrize("task, marker", [
        (TextTask.SENTIMENT, "Cloud NLP API"),
        (TextTask.QA, "My Business Q&A API"),
    ])
    def test_task_selects_preamble(self, task, marker):
        system_instruction, prompt = adapters.build_text_prompt("text", task)
        assert marker in system_instruction
        assert '"text"' in prompt

    @pytest.mark.asyncio
    async def test_empty_model_text_fallback(self):
        client = StubClient(text="")
        assert await adapters.process_text_analysis(client, "x", TextTask.QA) == "No response generated."

    @pytest.mark.asyncio
    async def test_simulate_api(self):
        client = StubClient(text='{"threatTypes": []}')
        result = await adapters.simulate_api(client, "Web Risk API", "http://example.test")

        assert result == '{"threatTypes": []}'
        assert client.requests[0].contents.startswith("Act as the Web Risk API.")
        assert client.requests[0].tools == ()

    @pytest.mark.asyncio
    async def test_simulate_api_fallback(self):
        assert await adapters.simulate_api(StubClient(text=""), "X", "y") == "No response."


# ── Vision ───────────────────────────────────────────────────────────

class TestVision:
    @pytest.mark.asyncio
    async def test_default_prompt_and_image(self):
        client = StubClient(text="A dog on a beach.")
        image = InlineImage(b"\xff\xd8", "image/jpeg")

        result = await adapters.analyze_image(client, image)

        assert result == "A dog on a beach."
        assert client.requests[0].contents == adapters.DEFAULT_VISION_PROMPT
        assert client.requests[0].image is image

    @pytest.mark.asyncio
    async def test_custom_prompt(self):
        client = StubClient(text="ok")
        await adapters.analyze_image(client, InlineImage(b"x"), "Count the cars.")
        assert client.requests[0].contents == "Count the cars."

    @pytest.mark.asyncio
    async def test_empty_text_fallback(self):
        result = await adapters.analyze_image(StubClient(text=""), InlineImage(b"x"))
        assert result == "No analysis could be generated."


# ── Grounded queries ─────────────────────────────────────────────────

class TestGrounding:
    @pytest.mark.asyncio
    async def test_live_search_appends_sources(self):
        client = StubClient(
            text="Gemini shipped a new model.",
            citations=[Citation("Blog", "https://blog"), Citation("Docs", "https://docs")],
        )
        result = await adapters.perform_live_search(client, "gemini news")

        assert client.requests[0].tools == (SEARCH,)
        assert result == (
            "Gemini shipped a new model.\n\n**Sources:**\n"
            "- [Blog](https://blog)\n- [Docs](https://docs)"
        )

    @pytest.mark.asyncio
    async def test_live_search_without_sources(self):
        result = await adapters.perform_live_search(StubClient(text="Nothing cited."), "q")
        assert result == "Nothing cited."

    @pytest.mark.asyncio
    async def test_maps_query(self):
        client = StubClient(text="", citations=[Citation("Cafe Uno", "https://maps/1")])
        result = await adapters.perform_maps_query(client, "coffee in Seattle")

        assert client.requests[0].tools == (MAPS,)
        assert result.startswith("No places found.")
        assert "- [Cafe Uno](https://maps/1)" in result

    def test_format_sources_skips_untitled(self):
        assert adapters.format_sources([Citation("", "https://x"), Citation("A", "u")]) == "- [A](u)"

    @pytest.mark.asyncio
    async def test_errors_propagate(self):
        client = StubClient(error=RequestFailed("down"))
        with pytest.raises(RequestFailed):
            await adapters.perform_live_search(client, "q")


# ── Structured adapters ──────────────────────────────────────────────

class TestMarketData:
    @pytest.mark.asyncio
    async def test_parses_points_in_order(self):
        body = '{"summary": "Up", "data": [{"name": "Q1", "value": 3}, {"name": "Q1", "value": 5, "category": "EU"}]}'
        client = StubClient(text=body)

        market = await adapters.generate_market_data(client, "EV sales")

        assert isinstance(market, MarketData)
        assert [(p.name, p.value, p.category) for p in market.data] == [("Q1", 3, None), ("Q1", 5, "EU")]
        assert client.requests[0].response_schema is MarketData

    @pytest.mark.asyncio
    async def test_malformed_body(self):
        with pytest.raises(MalformedResponse):
            await adapters.generate_market_data(StubClient(text="not json"), "EV sales")


class TestSiteAudit:
    @pytest.mark.asyncio
    async def test_example_com_end_to_end(self, site_audit_json):
        client = StubClient(text=site_audit_json)

        report = await adapters.generate_site_audit(client, "https://example.com")

        assert isinstance(report, SiteAuditReport)
        assert report.overall_score == 72
        assert len(report.resources) == 1
        assert report.model_dump(by_alias=True) == SITE_AUDIT_PAYLOAD

    @pytest.mark.asyncio
    async def test_request_shape(self, site_audit_json):
        client = StubClient(text=site_audit_json)
        await adapters.generate_site_audit(client, "https://example.com")

        request = client.requests[0]
        assert request.response_schema is SiteAuditReport
        assert request.tools == (SEARCH,)
        assert "https://example.com" in request.contents
        for resource in adapters.AUDIT_RESOURCES:
            assert resource in request.contents

    @pytest.mark.asyncio
    async def test_clinical_audit(self, clinical_audit_json):
        client = StubClient(text=clinical_audit_json)

        report = await adapters.generate_clinical_audit(client, "www.clinica.com.br")

        assert isinstance(report, ClinicalAuditReport)
        assert report.triage.status == "CRITICAL"
        assert report.prescription.ad_headlines[1] == "Prótese robótica"
        assert report.model_dump(by_alias=True) == CLINICAL_AUDIT_PAYLOAD
        assert "OrtoAudit" in client.requests[0].system_instruction

    @pytest.mark.asyncio
    async def test_generic_body_does_not_satisfy_clinical_schema(self, site_audit_json):
        with pytest.raises(MalformedResponse):
            await adapters.generate_clinical_audit(StubClient(text=site_audit_json), "x.com")

    @pytest.mark.asyncio
    async def test_run_site_audit_dispatch(self, site_audit_json, clinical_audit_json):
        generic = await adapters.run_site_audit(StubClient(text=site_audit_json), "a.com", AuditKind.GENERIC)
        clinical = await adapters.run_site_audit(StubClient(text=clinical_audit_json), "b.com", "clinical")
        assert isinstance(generic, SiteAuditReport)
        assert isinstance(clinical, ClinicalAuditReport)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", ["", "The site could not be reached."])
    async def test_malformed_or_empty(self, body):
        with pytest.raises(MalformedResponse):
            await adapters.generate_site_audit(StubClient(text=body), "https://example.com")


# ── Purity ───────────────────────────────────────────────────────────

class TestPurity:
    @pytest.mark.asyncio
    async def test_same_input_same_output(self, site_audit_json):
        client = StubClient(text=site_audit_json)
        first = await adapters.generate_site_audit(client, "https://example.com")
        second = await adapters.generate_site_audit(client, "https://example.com")

        assert first == second
        assert client.requests[0] == client.requests[1]

    @pytest.mark.asyncio
    async def test_text_adapter_idempotent(self):
        client = StubClient(text="42")
        outputs = [await adapters.simulate_api(client, "Google Trends", "AI") for _ in range(3)]
        assert outputs == ["42", "42", "42"]
