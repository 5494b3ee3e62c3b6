from typing import Optional

import attrs


@attrs.frozen
class ShopIdentity:
    """External identity of one advertised shop.

    computer_id comes from info.computerID, or from the reply channel when
    the sender omits it. multi_shop separates shops hosted on one computer.
    """

    computer_id: int
    name: str
    multi_shop: Optional[int] = None

    def __str__(self) -> str:
        suffix = f'#{self.multi_shop}' if self.multi_shop is not None else ''
        return f'{self.name}@{self.computer_id}{suffix}'
