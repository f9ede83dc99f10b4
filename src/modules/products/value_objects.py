"""ProductSize value object.

Immutable, compared by value.  Restricts a variant's size to the
catalog's closed set: ``ONE`` means "no size" (supplements, accessories),
the rest are apparel sizes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from modules.products.exceptions import InvalidSize

PRODUCT_SIZES = ("ONE", "XS", "S", "M", "L", "XL", "XXL")


@dataclass(frozen=True)
class ProductSize:
    value: str

    ONE: ClassVar[ProductSize]
    XS: ClassVar[ProductSize]
    S: ClassVar[ProductSize]
    M: ClassVar[ProductSize]
    L: ClassVar[ProductSize]
    XL: ClassVar[ProductSize]
    XXL: ClassVar[ProductSize]

    def __post_init__(self) -> None:
        if self.value not in PRODUCT_SIZES:
            raise InvalidSize(
                f'Invalid product size: "{self.value}". '
                f"Allowed: {', '.join(PRODUCT_SIZES)}"
            )

    @classmethod
    def from_value(cls, raw: str) -> ProductSize:
        """Normalise ``raw`` (trim + uppercase) and return the size.

        Raises:
            InvalidSize: if the normalised value is not a catalog size.
        """
        if isinstance(raw, ProductSize):
            return raw
        if not isinstance(raw, str):
            raise InvalidSize(
                f'Invalid product size: "{raw}". Allowed: {", ".join(PRODUCT_SIZES)}'
            )
        normalized = raw.strip().upper()
        if normalized not in PRODUCT_SIZES:
            raise InvalidSize(
                f'Invalid product size: "{raw}". Allowed: {", ".join(PRODUCT_SIZES)}'
            )
        return cls(normalized)

    def __str__(self) -> str:
        return self.value


ProductSize.ONE = ProductSize("ONE")
ProductSize.XS = ProductSize("XS")
ProductSize.S = ProductSize("S")
ProductSize.M = ProductSize("M")
ProductSize.L = ProductSize("L")
ProductSize.XL = ProductSize("XL")
ProductSize.XXL = ProductSize("XXL")
