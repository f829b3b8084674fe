"""Location cost estimates and expert advice from an OpenAI-compatible chat API.

Both calls degrade to fixed fallbacks on any failure; the engine never sees an
error from here.
"""

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

import httpx
from dotenv import load_dotenv

from budget_game.categories import CategoryId, get_category
from budget_game.params import DEFAULT_HOUSING_COST, DEFAULT_TAX_RATE, DEFAULT_UTILITY_COST
from budget_game.state import Allocation

logger = logging.getLogger(__name__)

load_dotenv()

DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_API_URL = "https://api.openai.com/v1/chat/completions"
REQUEST_TIMEOUT = 30.0

FALLBACK_ADVICE = (
    "Unable to get expert advice at this time. Please continue with your budget planning."
)

SYSTEM_PROMPTS = {
    "location_cost": "You are a cost of living data expert. Respond only with the requested JSON.",
    "expert_advice": "You are a professional cost of living and budgeting expert.",
}


@dataclass(frozen=True)
class LocationCostEstimate:
    housing_cost: float = DEFAULT_HOUSING_COST
    utility_cost: float = DEFAULT_UTILITY_COST
    tax_rate: float = DEFAULT_TAX_RATE
    is_fallback: bool = False


FALLBACK_ESTIMATE = LocationCostEstimate(is_fallback=True)


@dataclass(frozen=True)
class Advice:
    text: str
    is_fallback: bool = False


@dataclass(frozen=True)
class AdviceRequest:
    location: str
    monthly_salary: float
    allocations: dict[CategoryId, Allocation]
    iteration: int
    is_game_over: bool = False


@dataclass(frozen=True)
class ApiSettings:
    api_key: str | None
    model: str = DEFAULT_MODEL
    url: str = DEFAULT_API_URL

    @classmethod
    def from_env(cls) -> "ApiSettings":
        return cls(
            api_key=os.getenv("OPENAI_API_KEY"),
            model=os.getenv("BUDGET_GAME_MODEL", DEFAULT_MODEL),
            url=os.getenv("BUDGET_GAME_API_URL", DEFAULT_API_URL),
        )


def location_cost_prompt(location: str) -> str:
    return (
        f"As a cost of living expert, provide the following information for {location}:\n"
        "1. Average monthly housing cost (rent/mortgage) in USD\n"
        "2. Average monthly utility costs (electricity, water, gas) in USD\n"
        "3. Typical income tax rate as a percentage (federal + state + local)\n\n"
        "Return ONLY a JSON object with these three values as numbers "
        "(no text, no symbols, just numbers):\n"
        "{\n"
        '    "housing_cost": [housing cost number],\n'
        '    "utility_cost": [utility cost number],\n'
        '    "tax_rate": [tax rate percentage]\n'
        "}"
    )


def _allocation_lines(allocations: Mapping[CategoryId, Allocation]) -> str:
    return "\n".join(
        f"- {get_category(cid).label}: ${alloc.amount:,.2f}" for cid, alloc in allocations.items()
    )


def expert_advice_prompt(request: AdviceRequest) -> str:
    allocation_text = _allocation_lines(request.allocations)
    if request.is_game_over:
        return (
            f"As a professional cost of living expert, analyze this budget allocation for "
            f"someone living in {request.location} with a monthly salary of "
            f"${request.monthly_salary:,.2f}. The 6-month simulation ended after iteration "
            f"{request.iteration}.\n\n"
            f"Their last bi-weekly budget allocation was:\n{allocation_text}\n\n"
            "Please provide:\n"
            "1. Analysis of what went wrong or right\n"
            "2. 3 specific suggestions for better budget management next time\n"
            "3. Key lessons to learn from this experience\n\n"
            "Keep the response encouraging and constructive."
        )
    return (
        f"As a professional cost of living expert, analyze this budget allocation for "
        f"someone living in {request.location} with a monthly salary of "
        f"${request.monthly_salary:,.2f}. This is iteration {request.iteration} of their "
        "6-month budget planning.\n\n"
        f"Current bi-weekly budget allocation:\n{allocation_text}\n\n"
        "Please provide:\n"
        "1. Brief analysis of their spending patterns\n"
        f"2. 2-3 specific suggestions for improvement based on typical costs in {request.location}\n"
        "3. Any potential risks or opportunities in their current allocation\n\n"
        "Keep the response concise and practical."
    )


def build_payload(
    model: str, system_prompt: str, user_prompt: str,
    temperature: float = 0.2, max_tokens: int = 400,
) -> dict:
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        "temperature": temperature,
        "max_tokens": max_tokens,
    }


def extract_text(response_json: dict) -> str:
    text = (response_json["choices"][0]["message"]["content"] or "").strip()
    if not text:
        raise ValueError("empty completion")
    return text


async def call_llm(
    settings: ApiSettings,
    system_prompt: str,
    user_prompt: str,
    temperature: float = 0.2,
    max_tokens: int = 400,
    client: httpx.AsyncClient | None = None,
) -> str:
    """Send one chat completion and return the assistant text."""
    if not settings.api_key:
        raise RuntimeError("OPENAI_API_KEY is not configured")
    payload = build_payload(settings.model, system_prompt, user_prompt, temperature, max_tokens)
    headers = {
        "Authorization": f"Bearer {settings.api_key}",
        "Content-Type": "application/json",
    }
    if client is None:
        async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT) as own_client:
            r = await own_client.post(settings.url, headers=headers, json=payload)
    else:
        r = await client.post(settings.url, headers=headers, json=payload)
    r.raise_for_status()
    return extract_text(r.json())


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```") and text.endswith("```"):
        text = text[3:-3].strip()
        if text.startswith("json"):
            text = text[4:].strip()
    return text


def parse_location_costs(text: str) -> LocationCostEstimate:
    """Decode the estimate JSON. Any missing or non-numeric field is an error."""
    data = json.loads(_strip_code_fence(text))
    if not isinstance(data, dict):
        raise ValueError("location cost response is not a JSON object")
    values = {}
    for key in ("housing_cost", "utility_cost", "tax_rate"):
        v = data.get(key)
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError(f"location cost response missing numeric {key!r}")
        values[key] = float(v)
    return LocationCostEstimate(**values)


async def fetch_location_costs(
    location: str,
    settings: ApiSettings | None = None,
    client: httpx.AsyncClient | None = None,
) -> LocationCostEstimate:
    """Estimate monthly housing, utilities and tax rate for a location."""
    if settings is None:
        settings = ApiSettings.from_env()
    try:
        text = await call_llm(
            settings, SYSTEM_PROMPTS["location_cost"], location_cost_prompt(location),
            temperature=0.3, max_tokens=150, client=client,
        )
        return parse_location_costs(text)
    except (httpx.HTTPError, RuntimeError, ValueError, KeyError, IndexError, TypeError) as e:
        logger.warning("Location cost estimate failed for %r, using defaults: %s", location, e)
        return FALLBACK_ESTIMATE


async def fetch_expert_advice(
    request: AdviceRequest,
    settings: ApiSettings | None = None,
    client: httpx.AsyncClient | None = None,
) -> Advice:
    """Ask for commentary on the round's allocation."""
    if settings is None:
        settings = ApiSettings.from_env()
    try:
        text = await call_llm(
            settings, SYSTEM_PROMPTS["expert_advice"], expert_advice_prompt(request),
            temperature=0.7, max_tokens=400, client=client,
        )
        return Advice(text)
    except (httpx.HTTPError, RuntimeError, ValueError, KeyError, IndexError, TypeError) as e:
        logger.warning("Expert advice unavailable: %s", e)
        return Advice(FALLBACK_ADVICE, is_fallback=True)
