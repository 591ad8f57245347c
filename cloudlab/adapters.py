"""
Task Adapters
Each "simulated API" is a prompt (and sometimes a schema or a grounding tool) around the same model call.

Policy: blank input raises EmptyInput before the client is touched; RequestFailed and
MalformedResponse from the client propagate unchanged. Views decide what the user sees.
"""

import logging
from enum import Enum

from cloudlab.ai_engine import MAPS, SEARCH, ModelRequest
from cloudlab.errors import EmptyInput
from cloudlab.reports import AuditKind, ClinicalAuditReport, MarketData, SiteAuditReport

logger = logging.getLogger(__name__)

DEFAULT_VISION_PROMPT = "Analyze this image in detail. List objects, detect text, and describe the scene."


class TextTask(str, Enum):
    TRANSLATE = "TRANSLATE"
    SENTIMENT = "SENTIMENT"
    QA = "QA"


def _require(value, what="input"):
    if value is None or not str(value).strip():
        raise EmptyInput(f"No {what} provided")
    return str(value).strip()


def format_sources(citations):
    """
    Markdown bullet list of grounding sources, or "" when there are none.
    """
    return "\n".join(f"- [{c.title}]({c.uri})" for c in citations if c.title)


def _with_sources(text, citations):
    sources = format_sources(citations)
    if sources:
        text += f"\n\n**Sources:**\n{sources}"
    return text


# --- Vision ---

async def analyze_image(client, image, prompt=""):
    """
    Cloud Vision stand-in: describes an inline image.
    """
    if image is None or not image.data:
        raise EmptyInput("No image provided")

    request = ModelRequest(
        contents=(prompt or "").strip() or DEFAULT_VISION_PROMPT,
        image=image,
    )
    response = await client.generate(request)
    return response.text or "No analysis could be generated."


# --- Language ---

def build_text_prompt(text, task, target_lang=None):
    """
    Returns (system_instruction, user_prompt) for a TextTask.
    """
    task = TextTask(task)
    if task is TextTask.TRANSLATE:
        return (
            "You are a professional translator (Cloud Translation API).",
            f'Translate the following text to {target_lang or "English"}:\n\n"{text}"',
        )
    if task is TextTask.SENTIMENT:
        return (
            "You are a Natural Language Processing engine (Cloud NLP API).",
            f'Analyze the sentiment, extract entities, and syntax of the following text. '
            f'Provide a structured report:\n\n"{text}"',
        )
    return (
        "You are an intelligent business assistant (My Business Q&A API).",
        f'Answer the following customer question or review professionally and helpfully:\n\n"{text}"',
    )


async def process_text_analysis(client, text, task, target_lang=None):
    text = _require(text, "text")
    system_instruction, user_prompt = build_text_prompt(text, task, target_lang)

    response = await client.generate(
        ModelRequest(contents=user_prompt, system_instruction=system_instruction)
    )
    return response.text or "No response generated."


# --- Market data ---

async def generate_market_data(client, query):
    """
    Charts/Trends stand-in: a summary plus (name, value) points, schema-constrained.
    """
    query = _require(query, "query")
    prompt = f'''
    Generate a JSON dataset representing market trends or performance metrics for: "{query}".
    Also provide a brief summary string.
    The "data" field must be an array of objects with "name" (string) and "value" (number) keys,
    optionally with a "category" (string).
    '''
    return await client.generate_structured(
        ModelRequest(contents=prompt, response_schema=MarketData)
    )


# --- Generic simulation ---

async def simulate_api(client, api_name, text):
    text = _require(text)
    prompt = (
        f"Act as the {api_name}. Process the following input and return a realistic response "
        f"typical of this API (e.g., JSON analysis, report, or status):\n\n"
        f'Input: "{text}"'
    )
    response = await client.generate(ModelRequest(contents=prompt))
    return response.text or "No response."


# --- Grounded queries ---

async def perform_live_search(client, query):
    """
    Custom Search stand-in using Google Search grounding. Sources are appended as markdown links.
    """
    query = _require(query, "query")
    response = await client.generate(
        ModelRequest(
            contents=f"Search for the following and provide a summary with sources: {query}",
            tools=(SEARCH,),
        )
    )
    return _with_sources(response.text or "", response.citations)


async def perform_maps_query(client, query):
    """
    Places stand-in using Google Maps grounding.
    """
    query = _require(query, "query")
    response = await client.generate(
        ModelRequest(contents=f"Find place information for: {query}", tools=(MAPS,))
    )
    return _with_sources(response.text or "No places found.", response.citations)


# --- Site audits ---

AUDIT_RESOURCES = (
    "SEO",
    "Performance",
    "Security",
    "Accessibility",
    "Mobile Experience",
    "Content Quality",
    "Structured Data",
    "Local Presence",
    "Social Proof",
    "Conversion Design",
    "Analytics & Tracking",
    "Technical Health",
)

SITE_AUDIT_INSTRUCTION = '''
You are a **Senior Web Auditor** reviewing a public website for a client.
Be concrete and critical. Scores are integers from 0 to 100.
Status per resource: "Excellent" (85+), "Good" (70-84), "Fair" (50-69), "Poor" (below 50).
'''

CLINICAL_AUDIT_INSTRUCTION = '''
Você é o "OrtoAudit AI", consultor de elite em Marketing Médico especializado em Ortopedia e Traumatologia.
Transforme dados técnicos de sites em um "Diagnóstico Clínico Digital".

TOM E LINGUAGEM:
1. Metáforas médicas obrigatórias, nunca termos de TI isolados:
   - Site lento = "mobilidade reduzida", "articulação travada".
   - Sem versão mobile = "barreira arquitetônica".
   - Falha de segurança = "baixa imunidade", "risco de infecção hospitalar".
   - SEO fraco = "invisibilidade clínica", "prognóstico reservado".
2. Fale de médico para médico ("Colega"). Seja cirúrgico nas críticas.
3. Direcione a solução para cirurgias de alto valor (próteses, robótica).

PROTOCOLO:
1. TRIAGEM (performance e segurança).
2. EXAME DE IMAGEM (branding: fotos passam confiança ou são banco de imagem?).
3. RAIO-X DO MERCADO (concorrentes locais e perda de território).
4. PRESCRIÇÃO (3 headlines de anúncios e ação imediata).
'''


async def generate_site_audit(client, url):
    """
    Generic twelve-resource audit -> SiteAuditReport.
    """
    url = _require(url, "URL")
    resources = "\n".join(f"{i}. {name}" for i, name in enumerate(AUDIT_RESOURCES, start=1))
    prompt = f'''
    Audit the website: {url}
    Use Google Search to find real details about the site (performance, reputation, content).

    Score each of these {len(AUDIT_RESOURCES)} resources, in this order, with details and one recommendation:
    {resources}

    Return strict JSON following the provided schema: "domain", "overallScore", "summary", "resources".
    '''
    logger.info("Running generic site audit for %s", url)
    return await client.generate_structured(
        ModelRequest(
            contents=prompt,
            system_instruction=SITE_AUDIT_INSTRUCTION,
            response_schema=SiteAuditReport,
            tools=(SEARCH,),
        )
    )


async def generate_clinical_audit(client, url):
    """
    OrtoAudit: the medical-metaphor audit for orthopaedic clinics -> ClinicalAuditReport.
    """
    url = _require(url, "URL")
    prompt = f'''
    Analise o site: {url}.
    Use o Google Search para encontrar:
    1. O nome do médico e a especialidade exata.
    2. Concorrentes diretos na mesma cidade/região.
    3. Detalhes reais sobre performance, reputação e imagens usadas no site.

    "overallHealth" vai de 0 a 100. "adHeadlines" tem exatamente 3 itens.
    Gere um relatório JSON estrito seguindo o schema fornecido.
    '''
    logger.info("Running clinical site audit for %s", url)
    return await client.generate_structured(
        ModelRequest(
            contents=prompt,
            system_instruction=CLINICAL_AUDIT_INSTRUCTION,
            response_schema=ClinicalAuditReport,
            tools=(SEARCH,),
        )
    )


async def run_site_audit(client, url, kind=AuditKind.GENERIC):
    if AuditKind(kind) is AuditKind.CLINICAL:
        return await generate_clinical_audit(client, url)
    return await generate_site_audit(client, url)
