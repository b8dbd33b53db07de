"""Dexscreener market pairs provider."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from promptfeed.config.constants import DEX_CHAINS, Sentiment
from promptfeed.config.settings import settings
from promptfeed.ingestion.base import HTTPProvider, PartialResult, collect_partial
from promptfeed.ingestion.envelope import (
    AggregateSignal,
    NormalizedEnvelope,
    TrendRecord,
    dedupe_records,
)

MAX_BOOSTED_TOKENS = 20
MAX_PAIRS_PER_CHAIN = 15
NEW_PAIR_MAX_AGE_HOURS = 72


@dataclass
class DexscreenerRaw:
    """Pairs collected from Dexscreener in one fetch."""

    pairs: list[dict[str, Any]] = field(default_factory=list)
    boosted_tokens: list[dict[str, Any]] = field(default_factory=list)
    skipped: int = 0


class DexscreenerProvider(HTTPProvider[DexscreenerRaw]):
    """Trending and freshly created pairs from the Dexscreener API."""

    source_name = "dexscreener"
    rate_limit = settings.rate_limit_dexscreener

    def __init__(self, base_url: str | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.base_url = (base_url or settings.dexscreener_base_url).rstrip("/")

    async def fetch_raw(self) -> DexscreenerRaw:
        # Boosted list is required; a failure here goes to the retry policy
        resp = await self._get(f"{self.base_url}/token-boosts/top/v1")
        boosted = resp.json() or []
        if not isinstance(boosted, list):
            boosted = []

        details = await collect_partial(
            (
                self._fetch_token_pair(token.get("tokenAddress"))
                for token in boosted[:MAX_BOOSTED_TOKENS]
            ),
            logger=self.logger,
        )
        fresh = await collect_partial(
            (self._fetch_new_pairs(chain) for chain in DEX_CHAINS),
            logger=self.logger,
        )

        # Every pair sub-request failing is a failed fetch, left to the retry policy
        PartialResult(
            results=[*details.results, *fresh.results],
            errors=[*details.errors, *fresh.errors],
        ).raise_if_empty()

        pairs = list(details.results)
        for chain_pairs in fresh.results:
            pairs.extend(chain_pairs)

        return DexscreenerRaw(
            pairs=pairs,
            boosted_tokens=boosted,
            skipped=details.skipped + fresh.skipped,
        )

    async def _fetch_token_pair(self, token_address: str | None) -> dict[str, Any] | None:
        """Return the top pair for a token, if any."""
        if not token_address:
            return None
        resp = await self._get(f"{self.base_url}/latest/dex/tokens/{token_address}")
        pairs = (resp.json() or {}).get("pairs") or []
        return pairs[0] if pairs else None

    async def _fetch_new_pairs(self, chain: str) -> list[dict[str, Any]]:
        """Return pairs on ``chain`` created within the last 72 hours."""
        resp = await self._get(f"{self.base_url}/latest/dex/pairs/{chain}")
        pairs = (resp.json() or {}).get("pairs") or []

        now_ms = datetime.now(UTC).timestamp() * 1000
        max_age_ms = NEW_PAIR_MAX_AGE_HOURS * 60 * 60 * 1000
        recent = [
            pair for pair in pairs
            if pair.get("pairCreatedAt") and now_ms - pair["pairCreatedAt"] <= max_age_ms
        ]
        return recent[:MAX_PAIRS_PER_CHAIN]

    @staticmethod
    def _pair_to_record(pair: dict[str, Any]) -> TrendRecord:
        base_token = pair.get("baseToken") or {}
        volume = pair.get("volume") or {}
        chain = pair.get("chainId") or "unknown"
        pair_address = pair.get("pairAddress") or ""

        return TrendRecord(
            key=base_token.get("symbol") or "N/A",
            weight=float(volume.get("h24") or 0),
            tag=chain,
            metadata={
                "name": base_token.get("name") or "Unknown",
                "chain": chain,
                "volume_1h": float(volume.get("h1") or 0),
                "volume_24h": float(volume.get("h24") or 0),
                "liquidity": float((pair.get("liquidity") or {}).get("usd") or 0),
                "market_cap": float(pair.get("marketCap") or pair.get("fdv") or 0),
                "price_change_24h": float((pair.get("priceChange") or {}).get("h24") or 0),
                "pair_address": pair_address,
                "url": pair.get("url") or f"https://dexscreener.com/{chain}/{pair_address}",
            },
        )

    def normalize(self, raw: DexscreenerRaw) -> NormalizedEnvelope:
        records = dedupe_records([self._pair_to_record(p) for p in raw.pairs])

        return NormalizedEnvelope(
            source=self.source_name,
            items=records,
            aggregate=AggregateSignal(
                total_mentions=0,
                sentiment=Sentiment.NEUTRAL,
                top_tickers=[f"${r.key}" for r in records[:10]],
            ),
        )
