from typing import Dict, List, Optional
from decimal import Decimal, ROUND_HALF_UP
import logging

from bus_booking.config import settings
from bus_booking.bookings.schemas import ExtraAddon, FareBreakdown, PricedAddon

logger = logging.getLogger(__name__)

ADDON_PRICES: Dict[str, Decimal] = {
    "ColdDrink": Decimal('20'),
    "New Paper": Decimal('10'),
    "Chips": Decimal('30'),
}

CENT = Decimal('0.01')

class BookingFareService:
    """Prices a booking: seats, tax and add-ons"""

    def __init__(self, tax_rate: Optional[Decimal] = None, addon_prices: Optional[Dict[str, Decimal]] = None):
        self.tax_rate = tax_rate if tax_rate is not None else settings.TAX_RATE
        self.addon_prices = addon_prices if addon_prices is not None else ADDON_PRICES

    def calculate(
        self,
        number_of_seats: int,
        seat_cost: Decimal,
        addons: List[ExtraAddon]
    ) -> FareBreakdown:
        """Calculate the total amount for a booking"""

        seat_cost = Decimal(seat_cost)
        subtotal = number_of_seats * seat_cost
        tax = (subtotal * self.tax_rate).quantize(CENT, rounding=ROUND_HALF_UP)

        priced_addons, unpriced = self._price_addons(addons)
        addon_cost = sum((a.line_total for a in priced_addons), Decimal('0'))

        return FareBreakdown(
            seat_cost=seat_cost,
            number_of_seats=number_of_seats,
            subtotal=subtotal,
            tax=tax,
            addon_cost=addon_cost,
            total_amount=subtotal + tax + addon_cost,
            addons=priced_addons,
            unpriced_addons=unpriced
        )

    def _price_addons(self, addons: List[ExtraAddon]):
        priced = []
        unpriced = []

        for addon in addons:
            unit_price = self.addon_prices.get(addon.name)
            if unit_price is None:
                # Not on the price list: charged nothing and reported back
                logger.warning(f"Unknown extra addon: {addon.name}")
                unpriced.append(addon.name)
                priced.append(PricedAddon(name=addon.name, quantity=addon.quantity))
                continue

            priced.append(PricedAddon(
                name=addon.name,
                quantity=addon.quantity,
                unit_price=unit_price,
                line_total=unit_price * addon.quantity
            ))

        if priced:
            logger.info("Selected extra addons: " + ",".join(f"{a.name}-{a.quantity}" for a in priced))

        return priced, unpriced
