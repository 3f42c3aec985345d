# A cart is an ordered collection of lines, each an item from the menu plus a
# quantity and optional customization. Carts and lines are immutable values:
# every cart operation in services/cart.py returns a new Cart.
#
# Only ids, quantities and chosen option names are persisted (StoredCartLineDTO);
# names, prices and option surcharges are re-read from the catalog on load.
import json
import logging
import uuid
from decimal import Decimal
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from models.menu_item import CatalogItemDTO


def new_line_id() -> str:
    return uuid.uuid4().hex


class ChosenOption(BaseModel):
    """Selected customization option with its per-unit surcharge."""
    model_config = ConfigDict(frozen=True)

    name: str
    price_adjustment: Decimal = Decimal("0")


class SingleSelect(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["single"] = "single"
    option: ChosenOption

    @property
    def chosen(self) -> tuple[ChosenOption, ...]:
        return (self.option,)

    def to_record(self) -> str:
        return self.option.name


class MultiSelect(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["multi"] = "multi"
    options: tuple[ChosenOption, ...] = ()

    @property
    def chosen(self) -> tuple[ChosenOption, ...]:
        return self.options

    def to_record(self) -> list[str]:
        return [option.name for option in self.options]


Selection = Annotated[Union[SingleSelect, MultiSelect], Field(discriminator="kind")]


class Customization(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Keyed by customization category name (e.g. "spice_level")
    selections: dict[str, Selection] = Field(default_factory=dict)
    special_instructions: str | None = None

    def is_empty(self) -> bool:
        has_choice = any(selection.chosen for selection in self.selections.values())
        return not has_choice and not (self.special_instructions or "").strip()

    def price_adjustment(self) -> Decimal:
        return sum(
            (option.price_adjustment for selection in self.selections.values() for option in selection.chosen),
            Decimal("0")
        )

    def to_record(self) -> "StoredCustomizationDTO":
        return StoredCustomizationDTO(
            selections={name: selection.to_record() for name, selection in self.selections.items()},
            special_instructions=self.special_instructions
        )


class CartLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Synthetic id, never the catalog item id: customized lines may share an item
    line_id: str = Field(default_factory=new_line_id)
    item: CatalogItemDTO
    quantity: int = Field(ge=1)
    customization: Customization | None = None

    @property
    def item_id(self) -> int:
        return self.item.id

    @property
    def is_customized(self) -> bool:
        return self.customization is not None

    def to_record(self) -> "StoredCartLineDTO":
        return StoredCartLineDTO(
            line_id=self.line_id,
            item_id=self.item.id,
            quantity=self.quantity,
            customization=self.customization.to_record() if self.customization else None
        )


class Cart(BaseModel):
    model_config = ConfigDict(frozen=True)

    lines: tuple[CartLine, ...] = ()

    def is_empty(self) -> bool:
        return len(self.lines) == 0

    def find_line(self, line_id: str) -> CartLine | None:
        return next((line for line in self.lines if line.line_id == line_id), None)


class StoredCustomizationDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    selections: dict[str, str | list[str]] = Field(default_factory=dict)
    special_instructions: str | None = Field(default=None, alias="specialInstructions")


class StoredCartLineDTO(BaseModel):
    """One line of the persisted cart record (local file or user_carts.cart_data)."""
    model_config = ConfigDict(populate_by_name=True)

    # Missing in records written before lines had their own id
    line_id: str | None = Field(default=None, alias="lineId")
    item_id: int = Field(alias="itemId")
    quantity: int = Field(ge=1)
    customization: StoredCustomizationDTO | None = None


def parse_cart_records(raw_records: list) -> list[StoredCartLineDTO]:
    """
    Validate a decoded persisted cart record.

    Entries that don't match the record shape (missing itemId, quantity < 1, ...)
    are skipped so one corrupt line doesn't cost the customer the whole cart.
    """
    records = []
    if not isinstance(raw_records, list):
        logging.warning(f"Ignoring cart record of type {type(raw_records).__name__}, expected a list")
        return records
    for raw_record in raw_records:
        try:
            records.append(StoredCartLineDTO.model_validate(raw_record))
        except ValidationError as e:
            logging.warning(f"Skipping malformed cart record {raw_record!r}: {e.error_count()} validation error(s)")
    return records


def dump_cart_records(records: list[StoredCartLineDTO]) -> str:
    return json.dumps([record.model_dump(mode="json", by_alias=True, exclude_none=True) for record in records])
