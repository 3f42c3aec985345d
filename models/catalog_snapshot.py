from pydantic import BaseModel, Field

from models.customization import CategoryCustomizationDTO
from models.menu_item import CatalogItemDTO


class CatalogSnapshotDTO(BaseModel):
    """
    Catalog state a cart is reconciled against.

    items: active items by id; ids that are absent were deleted, deactivated
           or could not be looked up.
    customizations: offered customizations by menu category name; a category
           that is absent could not be looked up (an empty tuple means the
           category has no customizations).
    """
    items: dict[int, CatalogItemDTO] = Field(default_factory=dict)
    customizations: dict[str, tuple[CategoryCustomizationDTO, ...]] = Field(default_factory=dict)
