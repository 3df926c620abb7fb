"""Abstract read access to the store's tax settings document."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.tax import TaxSettings


class TaxSettingsRepository(ABC):

    @abstractmethod
    def get(self) -> TaxSettings | None:
        """Return the tax settings, or None if no settings document exists."""
