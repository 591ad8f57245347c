"""
API Catalogue
The cards shown in the API Test Lab. Each card maps its input string to one adapter call.
"""

from dataclasses import dataclass
from typing import Awaitable, Callable

from cloudlab import adapters
from cloudlab.image_input import decode_data_url


@dataclass(frozen=True)
class ApiCard:
    id: str
    name: str
    icon: str
    description: str
    default_input: str
    input_type: str  # "text" or "image"
    handler: Callable[..., Awaitable[str]]

    @property
    def is_image(self):
        return self.input_type == "image"


def _simulated(api_name, template="{}"):
    async def handler(client, value):
        # Blank input must stay blank so the adapter rejects it
        text = template.format(value) if value and value.strip() else value
        return await adapters.simulate_api(client, api_name, text)
    return handler


async def _vision(client, value):
    return await adapters.analyze_image(client, decode_data_url(value), "Analyze this image.")


async def _places(client, value):
    return await adapters.perform_maps_query(client, value)


async def _search(client, value):
    return await adapters.perform_live_search(client, value)


API_CARDS = (
    ApiCard("webrisk", "Web Risk API", "🛡️", "Check URLs for malware or phishing.",
            "http://malware.testing.google.test/testing/malware/", "text", _simulated("Web Risk API")),
    ApiCard("vision", "Cloud Vision API", "👁️", "Analyze image content and objects.",
            "", "image", _vision),
    ApiCard("translate", "Cloud Translation API", "🌐", "Translate text between languages.",
            "Hello world, welcome to the cloud.", "text",
            _simulated("Cloud Translation API", "Translate to Spanish: {}")),
    ApiCard("nlp", "Cloud Natural Language API", "🧠", "Analyze sentiment and entities.",
            "Google Cloud Platform provides reliable infrastructure.", "text",
            _simulated("Cloud Natural Language API")),
    ApiCard("crux", "Chrome UX Report API", "🧭", "Get user experience metrics for a URL.",
            "https://www.google.com", "text", _simulated("Chrome UX Report API")),
    ApiCard("charts", "Google Charts API", "📊", "Generate chart configuration data.",
            "Monthly sales data for 2024", "text", _simulated("Google Charts API")),
    ApiCard("business", "Business Profile API", "🏪", "Manage location performance data.",
            "Get performance metrics for \"Joe's Coffee\"", "text",
            _simulated("Business Profile Performance API")),
    ApiCard("places", "Google Places API (New)", "📍", "Query place information (Grounding).",
            "Coffee shops in downtown Seattle", "text", _places),
    ApiCard("pagespeed", "PageSpeed Insights API", "⏱️", "Analyze page performance scores.",
            "https://example.com", "text", _simulated("PageSpeed Insights API")),
    ApiCard("trends", "Google Trends", "📈", "Analyze search interest over time.",
            "Artificial Intelligence interest 2024", "text", _simulated("Google Trends")),
    ApiCard("autocomplete", "Google Autocomplete", "⌨️", "Predict completions for input.",
            "How to integ", "text", _simulated("Google Places Autocomplete")),
    ApiCard("search", "Custom Search JSON API", "🔎", "Search the web (Grounding).",
            "Latest updates on Gemini API", "text", _search),
    ApiCard("ads", "Google Ads Editor", "🧾", "Generate CSV format for Ads.",
            "Campaign for Summer Sale 2025", "text", _simulated("Google Ads Editor (CSV Export)")),
    ApiCard("qa", "My Business Q&A API", "💬", "Answer customer questions.",
            "What are your opening hours?", "text", _simulated("My Business Q&A API")),
)

_BY_ID = {card.id: card for card in API_CARDS}


def get_card(card_id):
    try:
        return _BY_ID[card_id]
    except KeyError:
        raise KeyError(f"Unknown API card: {card_id}") from None
