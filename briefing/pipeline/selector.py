"""Fallback selector — first usable result wins, in fixed priority order.

A result is usable when its status is PARTIAL or FULL, i.e. at least one real
data point was obtained. Providers after the accepted one are never called.
"""

from dataclasses import dataclass
from typing import List

from briefing.core.logger import logger
from briefing.models.datatypes import ProviderResult
from briefing.providers.base import DataProvider


@dataclass
class CategoryChain:
    """Ordered candidate providers for one data category."""
    category: str
    providers: List[DataProvider]

    @property
    def provider_ids(self) -> List[str]:
        return [p.name for p in self.providers]


def select(chain: CategoryChain) -> ProviderResult:
    """Run ``chain`` in order and return the first usable result.

    Returns:
        ProviderResult: The accepted provider's result, or an UNAVAILABLE
        result tagged with the category name when every candidate is rejected.
    """
    rejected: List[str] = []
    for provider in chain.providers:
        result = provider.run()
        if result.usable:
            logger.info(
                f"[{chain.category}] source={result.provider} | status={result.status.value}"
                + (f" | rejected={','.join(rejected)}" if rejected else "")
            )
            return result
        rejected.append(f"{provider.name}({result.reason})")

    logger.warning(
        f"[{chain.category}] source=none | reason=CATEGORY_TOTAL_FAILURE — "
        f"all candidates rejected: {'; '.join(rejected) or 'no providers'}"
    )
    return ProviderResult.unavailable(chain.category, "all candidates rejected")

