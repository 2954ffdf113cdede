from decimal import Decimal

import attrs


@attrs.frozen
class PriceBreakdown:
    unit_price: Decimal
    quantity: int
    subtotal: Decimal
    platform_fee: Decimal
    total_amount: Decimal
    currency: str
