"""
Platform adapter contract.

Every platform implements PlatformAdapter.scrape() and returns a PlatformSignals.
Platform-specific query/parse logic lives in concrete adapter classes; the scrape
coordinator only sees the uniform interface.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Type

from verifyit.models.lead import LeadData
from verifyit.models.signals import PlatformSignals


class PlatformAdapter(ABC):
    """
    Base class for all platform adapters.

    An adapter turns a lead's name/company into a platform-specific query,
    fetches the response, and extracts a normalized signal record. Network
    failures and non-2xx responses are NOT swallowed here: they propagate so the
    coordinator's retry/timeout wrappers can act on them.
    """
    platform: str = ''
    label: str = ''

    # Metadata, shown by GET /health
    description: str = ''
    source: str = ''

    @abstractmethod
    def scrape(self, lead: LeadData) -> PlatformSignals:
        """
        Query this platform for the lead.

        Args:
            lead: Validated lead. Adapters read name and company; Reddit also
                  reads history_window.

        Returns:
            PlatformSignals for this platform.
        """
        ...


# ── Adapter registry ──────────────────────────────────────────────────────────
# adapters.py populates ADAPTERS = {'x': XAdapter, 'reddit': RedditAdapter, ...}
# and mock_adapters.py populates MOCK_ADAPTERS with the same keys.


def build_adapters(registry: Dict[str, Type[PlatformAdapter]], platforms: List[str]) -> Dict[str, PlatformAdapter]:
    """Instantiate one adapter per platform, in the given order."""
    adapters = {}
    for platform in platforms:
        adapter_cls = registry.get(platform)
        if not adapter_cls:
            raise ValueError(f"No adapter registered for platform '{platform}'")
        adapters[platform] = adapter_cls()
    return adapters


def get_platform_info(registry: Dict[str, Type[PlatformAdapter]]) -> Dict[str, Any]:
    """
    Serialize an adapter registry into a JSON-friendly dict.

    Returns: { "x": { "label": "X", "description": "...", "source": "..." }, ... }
    """
    return {
        platform: {
            'label': cls.label or platform,
            'description': cls.description or '',
            'source': cls.source or '',
        }
        for platform, cls in registry.items()
    }
