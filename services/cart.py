import json
import logging
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

import config
from db import session_commit, session_rollback
from enums.currency import Currency
from exceptions.storage import StorageUnavailableException, RemoteFetchException
from models.cart import (
    Cart,
    CartLine,
    ChosenOption,
    Customization,
    MultiSelect,
    SingleSelect,
    StoredCartLineDTO,
    StoredCustomizationDTO,
    dump_cart_records,
    new_line_id,
    parse_cart_records,
)
from models.catalog_snapshot import CatalogSnapshotDTO
from models.customization import CategoryCustomizationDTO
from models.menu_item import CatalogItemDTO
from models.user import UserIdentityDTO
from repositories.local_cart import LocalCartRepository
from repositories.user_cart import UserCartRepository
from services.catalog import CatalogService

logger = logging.getLogger(__name__)


class CartService:
    """
    Cart engine.

    Cart operations (add_line, set_quantity, remove_line, clear, reconcile) are
    pure: they take a Cart and return a new Cart, never mutating their input.
    Storage is only touched by load(), persist() and clear_persisted(), which
    callers invoke explicitly after each mutation (see services/cart_store.py).

    Expected conditions (missing items, unreadable storage, empty carts) never
    raise; they produce a degraded but valid Cart and a log entry.
    """

    # ------------------------------------------------------------------
    # Cart operations
    # ------------------------------------------------------------------

    @staticmethod
    def add_line(
        cart: Cart,
        item: CatalogItemDTO,
        quantity: int,
        customization: Customization | None = None
    ) -> Cart:
        """
        Add an item to the cart.

        Identity rule:
        - Customized lines are never merged; each add appends a new line,
          even for an identical customization.
        - Plain lines are deduplicated by catalog item id; adding the same
          plain item again increases the existing line's quantity.

        A customization without any chosen option or instructions counts as
        plain.

        Args:
            cart: Current cart
            item: Catalog item to add
            quantity: Units to add; below 1 is a no-op
            customization: Optional chosen options and special instructions

        Returns:
            New Cart (the input cart unchanged if quantity < 1)
        """
        if quantity < 1:
            logger.debug(f"Ignoring add of item {item.id} with invalid quantity {quantity}")
            return cart

        if customization is not None and customization.is_empty():
            customization = None

        if customization is not None:
            line = CartLine(item=item, quantity=quantity, customization=customization)
            return Cart(lines=cart.lines + (line,))

        for index, line in enumerate(cart.lines):
            if line.item_id == item.id and not line.is_customized:
                merged = line.model_copy(update={"quantity": line.quantity + quantity})
                return Cart(lines=cart.lines[:index] + (merged,) + cart.lines[index + 1:])

        return Cart(lines=cart.lines + (CartLine(item=item, quantity=quantity),))

    @staticmethod
    def set_quantity(cart: Cart, line_id: str, quantity: int) -> Cart:
        """Set a line's quantity; below 1 removes the line. Unknown line ids leave the cart unchanged."""
        if quantity < 1:
            return CartService.remove_line(cart, line_id)
        if cart.find_line(line_id) is None:
            return cart
        return Cart(lines=tuple(
            line.model_copy(update={"quantity": quantity}) if line.line_id == line_id else line
            for line in cart.lines
        ))

    @staticmethod
    def remove_line(cart: Cart, line_id: str) -> Cart:
        if cart.find_line(line_id) is None:
            return cart
        return Cart(lines=tuple(line for line in cart.lines if line.line_id != line_id))

    @staticmethod
    def clear() -> Cart:
        return Cart()

    # ------------------------------------------------------------------
    # Pricing
    # ------------------------------------------------------------------

    @staticmethod
    def unit_price(line: CartLine) -> Decimal:
        """Base price plus the surcharge of every chosen option (multi-select options all count)."""
        adjustment = line.customization.price_adjustment() if line.customization else Decimal("0")
        return line.item.price + adjustment

    @staticmethod
    def price_line(line: CartLine) -> Decimal:
        """
        Price of one line, unrounded.

        Example: item at 299 with two toppings at +20 each, quantity 2:
            (299 + 20 + 20) × 2 = 678
        """
        return CartService.unit_price(line) * line.quantity

    @staticmethod
    def cart_total(cart: Cart) -> Decimal:
        return sum((CartService.price_line(line) for line in cart.lines), Decimal("0"))

    @staticmethod
    def item_count(cart: Cart) -> int:
        return sum(line.quantity for line in cart.lines)

    @staticmethod
    def round_amount(amount: Decimal, currency: Currency | None = None) -> Decimal:
        """
        Round an amount to the currency's minor unit.

        Only used at display/checkout time; cart arithmetic stays unrounded.
        """
        currency = currency or config.CURRENCY
        quantum = Decimal(1).scaleb(-currency.get_minor_units())
        return Decimal(amount).quantize(quantum, rounding=ROUND_HALF_UP)

    @staticmethod
    def format_amount(amount: Decimal, currency: Currency | None = None) -> str:
        """Format an amount for display, e.g. "₹678.00"."""
        currency = currency or config.CURRENCY
        return f"{currency.get_symbol()}{CartService.round_amount(amount, currency)}"

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    @staticmethod
    def reconcile(cart: Cart, snapshot: CatalogSnapshotDTO) -> Cart:
        """
        Refresh every line against current catalog data.

        Lines whose item is in the snapshot get the current name, price,
        description and image, keeping line id, quantity and customization
        (with option surcharges re-read). Lines whose item is gone are dropped,
        so displayed prices never come from a stale cached copy.
        """
        return CartService.from_records(CartService.to_records(cart), snapshot)

    @staticmethod
    def to_records(cart: Cart) -> list[StoredCartLineDTO]:
        return [line.to_record() for line in cart.lines]

    @staticmethod
    def from_records(records: list[StoredCartLineDTO], snapshot: CatalogSnapshotDTO) -> Cart:
        lines = []
        for record in records:
            line = CartService._resolve_line(record, snapshot)
            if line is not None:
                lines.append(line)
        return Cart(lines=tuple(lines))

    @staticmethod
    def _resolve_line(record: StoredCartLineDTO, snapshot: CatalogSnapshotDTO) -> CartLine | None:
        item = snapshot.items.get(record.item_id)
        if item is None:
            logger.info(f"Dropping cart line {record.line_id}: item {record.item_id} is not in the catalog")
            return None

        customization = None
        if record.customization is not None:
            offered = snapshot.customizations.get(item.category)
            if offered is None:
                logger.warning(
                    f"Dropping customized cart line {record.line_id}: "
                    f"customizations for '{item.category}' could not be looked up"
                )
                return None
            customization = CartService._reprice_customization(record.customization, offered)

        return CartLine(
            line_id=record.line_id or new_line_id(),
            item=item,
            quantity=record.quantity,
            customization=customization
        )

    @staticmethod
    def _reprice_customization(
        stored: StoredCustomizationDTO,
        offered: tuple[CategoryCustomizationDTO, ...]
    ) -> Customization:
        """
        Rebuild a stored customization with current option surcharges.

        Options that are no longer offered (deleted or deactivated) are removed
        from the selection; they can't be ordered, so they aren't charged.
        """
        offered_by_name = {offer.customization_category.name: offer for offer in offered}
        selections = {}
        for category_name, stored_selection in stored.selections.items():
            offer = offered_by_name.get(category_name)
            if offer is None:
                logger.warning(f"Customization '{category_name}' is no longer offered, removing it from the line")
                continue

            names = [stored_selection] if isinstance(stored_selection, str) else stored_selection
            options_by_name = {option.name: option for option in offer.options}
            chosen = []
            for name in names:
                if not name:
                    continue
                option = options_by_name.get(name)
                if option is None:
                    logger.warning(f"Option '{name}' of '{category_name}' is no longer available, removing it")
                    continue
                chosen.append(ChosenOption(name=option.name, price_adjustment=option.price_adjustment))

            if offer.is_multi_select:
                selections[category_name] = MultiSelect(options=tuple(chosen[:offer.max_selections]))
            elif chosen:
                selections[category_name] = SingleSelect(option=chosen[0])

        return Customization(selections=selections, special_instructions=stored.special_instructions)

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    @staticmethod
    async def load(
        identity: UserIdentityDTO | None,
        local_storage: LocalCartRepository | None,
        session: AsyncSession | Session
    ) -> Cart:
        """
        Load the authoritative cart for a session and reconcile it with the catalog.

        Source resolution:
        1. Signed in and a remote cart exists -> remote cart
        2. Signed in, no remote cart -> local cart, promoted to remote
           (written remotely, then local storage is cleared)
        3. Anonymous -> local cart
        4. Nothing stored -> empty cart

        Failures degrade instead of raising: an unreadable remote cart loads
        as empty (without promotion), unreadable local storage loads as empty,
        and lines whose catalog lookup fails are dropped.
        """
        records = await CartService._resolve_records(identity, local_storage, session)
        if not records:
            return Cart()
        snapshot = await CatalogService.get_snapshot([record.item_id for record in records], session)
        return CartService.from_records(records, snapshot)

    @staticmethod
    async def _resolve_records(
        identity: UserIdentityDTO | None,
        local_storage: LocalCartRepository | None,
        session: AsyncSession | Session
    ) -> list[StoredCartLineDTO]:
        if identity is None:
            return CartService._with_line_ids(CartService._read_local(local_storage))

        try:
            remote_records = await CartService._read_remote(identity.id, session)
        except RemoteFetchException as e:
            logger.error(f"{e}; continuing with an empty cart")
            return []

        if remote_records is not None:
            return CartService._with_line_ids(remote_records)

        local_records = CartService._with_line_ids(CartService._read_local(local_storage))
        if local_records:
            await CartService._promote(identity, local_records, local_storage, session)
        return local_records

    @staticmethod
    def _with_line_ids(records: list[StoredCartLineDTO]) -> list[StoredCartLineDTO]:
        return [
            record if record.line_id else record.model_copy(update={"line_id": new_line_id()})
            for record in records
        ]

    @staticmethod
    def _read_local(local_storage: LocalCartRepository | None) -> list[StoredCartLineDTO]:
        if local_storage is None:
            return []
        try:
            return local_storage.read()
        except StorageUnavailableException as e:
            logger.warning(f"{e}; continuing without the local cart")
            return []

    @staticmethod
    async def _read_remote(user_id: str, session: AsyncSession | Session) -> list[StoredCartLineDTO] | None:
        """
        Returns:
            Stored lines, or None if the user has no remote cart yet

        Raises:
            RemoteFetchException: If the remote cart cannot be read or decoded
        """
        try:
            user_cart = await UserCartRepository.get(user_id, session)
        except SQLAlchemyError as e:
            await session_rollback(session)
            raise RemoteFetchException(user_id, str(e))

        if user_cart is None:
            return None
        try:
            raw_records = json.loads(user_cart.cart_data)
        except json.JSONDecodeError as e:
            raise RemoteFetchException(user_id, f"invalid cart data: {e}")
        return parse_cart_records(raw_records)

    @staticmethod
    async def _promote(
        identity: UserIdentityDTO,
        records: list[StoredCartLineDTO],
        local_storage: LocalCartRepository | None,
        session: AsyncSession | Session
    ) -> None:
        """One-time move of an anonymous local cart into the user's remote cart."""
        try:
            await UserCartRepository.upsert(identity.id, dump_cart_records(records), session)
            await session_commit(session)
        except SQLAlchemyError as e:
            await session_rollback(session)
            # Local cart stays in place so promotion is retried on the next load
            logger.error(f"Could not promote local cart to user {identity.id}: {e}")
            return

        logger.info(f"Promoted local cart ({len(records)} line(s)) to user {identity.id}")
        try:
            local_storage.clear()
        except StorageUnavailableException as e:
            logger.warning(f"{e}; local cart was promoted but could not be cleared")

    @staticmethod
    async def persist(
        cart: Cart,
        identity: UserIdentityDTO | None,
        local_storage: LocalCartRepository | None,
        session: AsyncSession | Session
    ) -> bool:
        """
        Write the cart to its authoritative store: remote when signed in, local otherwise.

        Must be called after every mutation. A storage failure is logged and the
        session continues with the in-memory cart.

        Returns:
            True if the cart was written
        """
        records = CartService.to_records(cart)
        if identity is not None:
            try:
                await UserCartRepository.upsert(identity.id, dump_cart_records(records), session)
                await session_commit(session)
                return True
            except SQLAlchemyError as e:
                await session_rollback(session)
                logger.error(f"{StorageUnavailableException('remote', str(e))}; cart kept in memory only")
                return False

        if local_storage is None:
            return False
        try:
            local_storage.write(records)
            return True
        except StorageUnavailableException as e:
            logger.warning(f"{e}; cart kept in memory only")
            return False

    @staticmethod
    async def clear_persisted(
        identity: UserIdentityDTO | None,
        local_storage: LocalCartRepository | None,
        session: AsyncSession | Session
    ) -> bool:
        """
        Empty the stored cart: local storage always, the remote cart too when signed in.

        Returns:
            True if every store that applies was cleared
        """
        cleared = True
        if local_storage is not None:
            try:
                local_storage.clear()
            except StorageUnavailableException as e:
                logger.warning(str(e))
                cleared = False

        if identity is not None:
            try:
                await UserCartRepository.upsert(identity.id, dump_cart_records([]), session)
                await session_commit(session)
            except SQLAlchemyError as e:
                await session_rollback(session)
                logger.error(f"Could not clear remote cart of user {identity.id}: {e}")
                cleared = False
        return cleared
