"""JSON-file-backed implementation of TaxSettingsRepository.

The file holds the same ``shippingAndTaxes`` document the CMS serves.
A missing file means no settings document exists.
"""

from __future__ import annotations

import json
from pathlib import Path

from storefront.domain.exceptions import TaxSettingsUnavailableError, ValidationError
from storefront.domain.model.tax import TaxSettings
from storefront.domain.repository.tax_settings_repository import TaxSettingsRepository
from storefront.infrastructure.documents import tax_settings_from_document


class JsonTaxSettingsRepository(TaxSettingsRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    def get(self) -> TaxSettings | None:
        if not self._file_path.exists():
            return None
        try:
            doc = json.loads(self._file_path.read_text(encoding="utf-8"))
            return tax_settings_from_document(doc)
        except (OSError, ValueError, ValidationError) as exc:
            raise TaxSettingsUnavailableError(
                f"Could not read tax settings file {self._file_path}: {exc}"
            ) from exc
