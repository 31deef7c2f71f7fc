"""Default bullion products (Cooksongold casting grain)."""

from bullion_fetcher.models import Source

_BASE = "https://www.cooksongold.com/Grain-and-Casting-Pieces/"

DEFAULT_SOURCES: tuple[Source, ...] = (
    Source("925 silver", _BASE + "Sterling-Silver-Grain,-100--------Recycled-Silver-prcode-ASA-000"),
    Source("fine silver", _BASE + "Fine-Silver-Grain,-100-Recycled---Silver-prcode-ASF-000"),
    Source("9K gold", _BASE + "9ct-Casting-Yellow-Grain,-100-----Recycled-Gold-prcode-AAB-000"),
    Source("14K gold", _BASE + "14ct-Ay-Yellow-Grain,-100-Recycled-Gold-prcode-AGE-000"),
    Source("18K gold", _BASE + "18ct-Hcb-Yellow-Grain,-100--------Recycled-Gold-prcode-ALO-000"),
    Source("22K gold", _BASE + "22ct-Yellow-Ds-Grain,-100-Recycled-Gold-prcode-AQA-000"),
    Source("24K gold", _BASE + "Fine-Gold-Grain-Minimum-99.96-Au,-100-Recycled-Gold-prcode-ARZ-000"),
    Source("palladium", _BASE + "Palladium-Casting-Pieces-prcode-APAL-000"),
    Source("platinum", _BASE + "Platinum-Hc-Casting-Pieces-prcode-BXB-000"),
)
