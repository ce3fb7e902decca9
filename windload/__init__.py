"""Windload - site wind load calculator for AS/NZS 1170.2 regions."""

__version__ = "0.1.0"

from windload.engine import calculate  # noqa: E402
from windload.schemas import (  # noqa: E402
    SiteRequest,
    SiteResult,
    WindLoadRequest,
    WindLoadResult,
)
from windload.tables import CoreMaterial, DesignLife, TerrainCategory  # noqa: E402

__all__ = [
    "__version__",
    "calculate",
    "CoreMaterial",
    "DesignLife",
    "SiteRequest",
    "SiteResult",
    "TerrainCategory",
    "WindLoadRequest",
    "WindLoadResult",
]
