import asyncio
import logging
from typing import Callable

from db import get_db_session
from enums.payment_method import PaymentMethod
from models.cart import Cart, Customization
from models.menu_item import CatalogItemDTO
from models.order import OrderDTO, DeliveryDetailsDTO
from models.user import UserIdentityDTO
from repositories.local_cart import LocalCartRepository
from services.cart import CartService
from services.order import OrderService

logger = logging.getLogger(__name__)

CartListener = Callable[[Cart], None]


class CartStore:
    """
    Holds the cart of one storefront session.

    The only mutable cart reference in the application. Every change is
    published to subscribers and then persisted to the authoritative store
    (remote when signed in, local otherwise):

        store = CartStore(LocalCartRepository(config.LOCAL_CART_PATH))
        unsubscribe = store.subscribe(render_cart_badge)
        await store.load()
        await store.add_item(item, quantity=2)

    Writes are serialized through a lock and always store the latest cart, so
    the last write reflects the final state after rapid mutations. Mutations
    made while a load is running wait for it and apply on top of the loaded cart.
    """

    def __init__(
        self,
        local_storage: LocalCartRepository | None,
        identity: UserIdentityDTO | None = None,
        session_factory=get_db_session
    ):
        self._cart = Cart()
        self._identity = identity
        self._local_storage = local_storage
        self._session_factory = session_factory
        self._listeners: list[CartListener] = []
        self._persist_lock = asyncio.Lock()
        # Bumped on identity changes; loads started under an older generation are discarded
        self._generation = 0
        self._pending_loads = 0
        self._loads_done = asyncio.Event()
        self._loads_done.set()

    @property
    def cart(self) -> Cart:
        return self._cart

    @property
    def identity(self) -> UserIdentityDTO | None:
        return self._identity

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register a listener called with the new cart on every change. Returns the unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, cart: Cart) -> None:
        self._cart = cart
        for listener in list(self._listeners):
            try:
                listener(cart)
            except Exception as e:
                logger.error(f"Cart listener {listener!r} failed: {e}")

    async def load(self) -> Cart:
        """
        Load the cart for the current identity.

        Returns:
            The loaded cart, or the current one if the identity changed
            while loading
        """
        generation = self._generation
        self._pending_loads += 1
        self._loads_done.clear()
        try:
            async with self._session_factory() as session:
                cart = await CartService.load(self._identity, self._local_storage, session)
        finally:
            self._pending_loads -= 1
            if self._pending_loads == 0:
                self._loads_done.set()
        if generation != self._generation:
            logger.debug(f"Discarding stale cart load (generation {generation}, current {self._generation})")
            return self._cart
        self._publish(cart)
        return cart

    async def set_identity(self, identity: UserIdentityDTO | None) -> Cart:
        """Switch to a signed-in (or signed-out) session and load its cart, promoting a local cart on first sign-in."""
        self._generation += 1
        self._identity = identity
        return await self.load()

    async def add_item(
        self,
        item: CatalogItemDTO,
        quantity: int = 1,
        customization: Customization | None = None
    ) -> Cart:
        return await self._apply(lambda cart: CartService.add_line(cart, item, quantity, customization))

    async def set_quantity(self, line_id: str, quantity: int) -> Cart:
        return await self._apply(lambda cart: CartService.set_quantity(cart, line_id, quantity))

    async def remove_line(self, line_id: str) -> Cart:
        return await self._apply(lambda cart: CartService.remove_line(cart, line_id))

    async def clear(self) -> Cart:
        """Empty the cart in memory, in local storage and, when signed in, remotely."""
        await self._loads_done.wait()
        self._publish(CartService.clear())
        async with self._persist_lock:
            async with self._session_factory() as session:
                await CartService.clear_persisted(self._identity, self._local_storage, session)
        return self._cart

    async def checkout(self, delivery: DeliveryDetailsDTO, payment_method: PaymentMethod) -> OrderDTO:
        """
        Place an order for the current cart and clear it.

        Raises:
            OrderPlacementException: Order was not placed; the cart is kept
        """
        await self._loads_done.wait()
        async with self._session_factory() as session:
            order = await OrderService.place_order(self._identity, self._cart, delivery, payment_method, session)
        await self.clear()
        return order

    async def _apply(self, operation: Callable[[Cart], Cart]) -> Cart:
        await self._loads_done.wait()
        cart = operation(self._cart)
        if cart is self._cart:
            return cart
        self._publish(cart)
        await self._persist()
        return cart

    async def _persist(self) -> None:
        async with self._persist_lock:
            async with self._session_factory() as session:
                await CartService.persist(self._cart, self._identity, self._local_storage, session)
