"""
Resolución de precios por proveedor.

Cada proveedor declara un precio manual o una página web de la que se extrae
el precio con una regex (primer grupo de captura). Si la página no responde,
devuelve un status >= 400 o la regex no encuentra nada, se usa el precio de
fallback. resolve() no lanza excepciones: siempre retorna un ResolvedPricing.
"""

import math
import re
from dataclasses import dataclass

import httpx
import structlog

from ..config.schema import ManualPricing, Provider, WebPricing

logger = structlog.get_logger()

UNIT_CALL = "call"
UNIT_1K_TOKENS = "1k_tokens"

_MAX_REDIRECTS = 3
_REQUEST_TIMEOUT = 30.0


@dataclass
class ResolvedPricing:
    """Effective unit price for one provider during this run."""

    price: float
    unit: str
    source: str


UNKNOWN_PRICING = ResolvedPricing(price=0.0, unit=UNIT_CALL, source="unknown")


class PricingResolver:
    """Resolves provider pricing, fetching pricing pages over HTTP.

    One httpx client is shared by every lookup of a run. Lookups are
    sequential; there is no caching between runs.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout: float = _REQUEST_TIMEOUT,
        max_redirects: int = _MAX_REDIRECTS,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.Client(
            follow_redirects=True,
            max_redirects=max_redirects,
            timeout=timeout,
        )
        self._log = logger.bind(component="pricing_resolver")

    def __enter__(self) -> "PricingResolver":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def resolve(self, pricing: ManualPricing | WebPricing | None) -> ResolvedPricing:
        """Return the effective price, unit and source for a pricing rule."""
        match pricing:
            case None:
                return ResolvedPricing(price=0.0, unit=UNIT_CALL, source="unknown")

            case ManualPricing():
                return ResolvedPricing(
                    price=pricing.price or 0.0,
                    unit=pricing.unit,
                    source=pricing.note or "manual",
                )

            case WebPricing():
                scraped = self._scrape(pricing)
                if scraped is not None:
                    return scraped
                return ResolvedPricing(
                    price=_coalesce(pricing.fallback_price, pricing.price),
                    unit=pricing.unit,
                    source=pricing.note or "manual fallback",
                )

    def resolve_all(self, providers: dict[str, Provider]) -> dict[str, ResolvedPricing]:
        """Resolve every provider in config order, one at a time."""
        resolved: dict[str, ResolvedPricing] = {}
        for key, provider in providers.items():
            resolved[key] = self.resolve(provider.pricing)
            self._log.debug(
                "pricing.resolved",
                provider=key,
                price=resolved[key].price,
                unit=resolved[key].unit,
                source=resolved[key].source,
            )
        return resolved

    def fetch_text(self, url: str) -> str:
        """GET ``url`` and return its body.

        Raises:
            httpx.HTTPError: On transport errors, too many redirects or a
                status code >= 400.
        """
        response = self._client.get(url)
        response.raise_for_status()
        return response.text

    def _scrape(self, pricing: WebPricing) -> ResolvedPricing | None:
        if not (pricing.url and pricing.regex):
            return None

        try:
            body = self.fetch_text(pricing.url)
            match = re.search(pricing.regex, body, re.IGNORECASE)
        except httpx.HTTPError as e:
            self._log.debug("pricing.fetch_failed", url=pricing.url, error=str(e))
            return None
        except re.error as e:
            self._log.warning("pricing.invalid_regex", regex=pricing.regex, error=str(e))
            return None

        if not match or match.lastindex is None or not match.group(1):
            self._log.debug("pricing.regex_miss", url=pricing.url, regex=pricing.regex)
            return None

        price = _parse_number(match.group(1)) or pricing.fallback_price or pricing.price or 0.0
        return ResolvedPricing(price=price, unit=pricing.unit, source=pricing.url)


def resolve_pricing(
    pricing: ManualPricing | WebPricing | None,
    client: httpx.Client | None = None,
) -> ResolvedPricing:
    """Resolve a single pricing rule with a short-lived resolver."""
    with PricingResolver(client=client) as resolver:
        return resolver.resolve(pricing)


def _coalesce(*values: float | None) -> float:
    """First value that is not None, or 0.0."""
    for value in values:
        if value is not None:
            return float(value)
    return 0.0


def _parse_number(text: str) -> float:
    """Plain decimal number; anything else (thousands separators included) is 0."""
    if "_" in text:
        return 0.0
    try:
        value = float(text)
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0
