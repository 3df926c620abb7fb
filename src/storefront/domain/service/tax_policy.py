"""Domain service: resolve which tax settings apply to a checkout."""

from __future__ import annotations

import logging

from storefront.domain.exceptions import DomainException
from storefront.domain.model.tax import TaxSettings
from storefront.domain.repository.tax_settings_repository import TaxSettingsRepository

logger = logging.getLogger(__name__)


class TaxPolicyResolver:

    def __init__(self, tax_settings_repo: TaxSettingsRepository) -> None:
        self._tax_settings_repo = tax_settings_repo

    def fetch_tax_settings(self) -> TaxSettings | None:
        """Return the configured tax settings, or None when there are none.

        A settings source that cannot be read is logged and treated the
        same as an absent document: no tax is charged.
        """
        try:
            settings = self._tax_settings_repo.get()
        except DomainException:
            logger.exception("Could not read tax settings; charging no tax")
            return None

        if settings is not None and len(settings.tax_rates) > 1:
            logger.debug(
                "Only the first of %d configured tax rates is applied",
                len(settings.tax_rates),
            )
        return settings
