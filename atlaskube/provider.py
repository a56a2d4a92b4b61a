"""Cloud providers on which Atlas can provision hosts."""
from __future__ import annotations

from enum import Enum


class ProviderName(str, Enum):
    """Name of a cloud service provider as Atlas spells it."""

    AWS = "AWS"
    GCP = "GCP"
    AZURE = "AZURE"
    TENANT = "TENANT"

    def __str__(self) -> str:
        return self.value