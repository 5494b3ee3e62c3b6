from typing import Optional

import attrs


@attrs.frozen
class ItemRef:
    name: str  # Namespaced id as given by list(), e.g. "minecraft:diamond"
    display_name: str
    nbt: Optional[str] = None  # NBT hash, only for items that carry one
