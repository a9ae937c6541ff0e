"""Abstract base class for briefing data providers."""

from abc import ABC, abstractmethod
from typing import Optional

from briefing.core.logger import logger
from briefing.models.datatypes import ProviderResult


class DataProvider(ABC):
    """Abstract interface for one external data source.

    Subclasses implement :meth:`fetch`; callers only ever use :meth:`run`,
    which never raises.

    Attributes:
        name: Stable provider id used in logs and in ``ProviderResult.provider``.
        requires_key: When True and ``api_key`` is empty, no call is attempted.
    """

    name: str = "provider"
    requires_key: bool = False

    def __init__(self, api_key: Optional[str] = None) -> None:
        self.api_key = api_key

    def run(self) -> ProviderResult:
        """Fetch from the source, converting every failure into UNAVAILABLE."""
        if self.requires_key and not self.api_key:
            logger.info(f"{self.name}: no API key configured — skipping")
            return ProviderResult.unavailable(self.name, "missing credential")

        try:
            result = self.fetch()
        except Exception as exc:
            logger.error(f"{self.name}: fetch raised {type(exc).__name__}: {exc}")
            return ProviderResult.unavailable(self.name, f"error: {exc}")

        if not result.usable:
            logger.warning(f"{self.name}: unavailable ({result.reason})")
        return result

    @abstractmethod
    def fetch(self) -> ProviderResult:
        """
        Perform the network call(s) and normalize the response.

        Returns:
            ProviderResult: FULL/PARTIAL with a payload, or UNAVAILABLE.
        """
        pass
