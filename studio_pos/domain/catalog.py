"""Static reference data: sellable products and studio time slots.

The catalog is built once and handed to the services that need it, so
tests can swap in their own prices and slots.
"""

from dataclasses import dataclass

from studio_pos.utils.settings import (
    STUDIO_NAME,
    STUDIO_OPENING_HOUR,
    STUDIO_PRICE,
    STUDIO_SLOT_COUNT,
    STUDIO_SLOT_HOURS,
)


@dataclass(frozen=True)
class Product:
    """Catalog entry for a retail product. Price is in minor units."""

    id: str
    name: str
    price: int

    def __post_init__(self) -> None:
        if self.price < 0:
            raise ValueError("Product price cannot be negative")


@dataclass(frozen=True)
class TimeSlot:
    """Fixed studio window, labelled by wall-clock "HH:MM" strings."""

    start: str
    end: str


@dataclass(frozen=True)
class Catalog:
    studio_name: str
    studio_price: int
    slots: tuple[TimeSlot, ...]
    products: tuple[Product, ...]

    def __post_init__(self) -> None:
        if self.studio_price < 0:
            raise ValueError("Studio price cannot be negative")
        names = [p.name for p in self.products]
        if len(names) != len(set(names)):
            raise ValueError("Product names must be unique")

    def slot_for(self, start: str) -> TimeSlot | None:
        for slot in self.slots:
            if slot.start == start:
                return slot
        return None

    def product(self, product_id: str) -> Product | None:
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    def studio_item_name(self, slot: TimeSlot) -> str:
        return f"{self.studio_name} ({slot.start} - {slot.end})"


DEFAULT_PRODUCTS = (
    Product(id="1", name="Senar Gitar", price=10000),
    Product(id="2", name="Senar Bass", price=50000),
    Product(id="3", name="Stick Drum", price=25000),
    Product(id="4", name="Pick Gitar", price=5000),
    Product(id="5", name="Air Putih", price=5000),
    Product(id="6", name="Teh", price=5000),
    Product(id="7", name="Kopi", price=5000),
)


def build_slots(opening_hour: int, slot_hours: int, count: int) -> tuple[TimeSlot, ...]:
    """Consecutive slots from ``opening_hour``; labels wrap past midnight."""
    slots = []
    for i in range(count):
        start = (opening_hour + i * slot_hours) % 24
        end = (start + slot_hours) % 24
        slots.append(TimeSlot(start=f"{start:02d}:00", end=f"{end:02d}:00"))
    return tuple(slots)


def default_catalog() -> Catalog:
    return Catalog(
        studio_name=STUDIO_NAME,
        studio_price=STUDIO_PRICE,
        slots=build_slots(STUDIO_OPENING_HOUR, STUDIO_SLOT_HOURS, STUDIO_SLOT_COUNT),
        products=DEFAULT_PRODUCTS,
    )
