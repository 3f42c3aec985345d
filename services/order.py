from datetime import datetime
import json
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_commit, session_rollback
from enums.order_status import OrderStatus
from enums.payment_method import PaymentMethod
from exceptions.order import OrderNotFoundException, OrderPlacementException
from models.cart import Cart
from models.order import OrderDTO, DeliveryDetailsDTO
from models.user import UserIdentityDTO
from repositories.order import OrderRepository
from services.cart import CartService

logger = logging.getLogger(__name__)


class OrderService:

    @staticmethod
    async def place_order(
        identity: UserIdentityDTO | None,
        cart: Cart,
        delivery: DeliveryDetailsDTO,
        payment_method: PaymentMethod,
        session: AsyncSession | Session
    ) -> OrderDTO:
        """
        Place an order for the current cart in a single insert.

        The cart itself is not touched; clearing it after a successful order is
        the caller's job (see CartStore.checkout), so a failed order leaves the
        cart intact for a retry.

        Args:
            identity: Signed-in user placing the order
            cart: Cart snapshot to order
            delivery: Delivery details from the checkout form
            payment_method: Selected payment method
            session: Database session

        Returns:
            The stored order with status PLACED

        Raises:
            OrderPlacementException: If the user is not signed in, the cart is
                empty, delivery details are incomplete or the insert fails
        """
        if identity is None:
            raise OrderPlacementException("User not logged in")
        if cart.is_empty():
            raise OrderPlacementException("Cart is empty", user_id=identity.id)

        missing_fields = [field for field in ("name", "email", "address", "zipcode")
                          if not getattr(delivery, field).strip()]
        if missing_fields:
            raise OrderPlacementException(
                f"Missing delivery details: {', '.join(missing_fields)}", user_id=identity.id
            )

        bill_amount = CartService.round_amount(CartService.cart_total(cart))
        order_dto = OrderDTO(
            user_id=identity.id,
            items=OrderService._create_items_snapshot(cart),
            bill_amount=bill_amount,
            address=delivery.address.strip(),
            zipcode=delivery.zipcode.strip(),
            name=delivery.name.strip(),
            email=delivery.email.strip(),
            payment_method=payment_method,
            status=OrderStatus.PLACED,
            placed_at=datetime.now()
        )
        try:
            order = await OrderRepository.create(order_dto, session)
            await session_commit(session)
        except SQLAlchemyError as e:
            await session_rollback(session)
            logger.error(f"Order placement failed for user {identity.id}: {e}")
            raise OrderPlacementException(str(e), user_id=identity.id)

        logger.info(
            f"Order {order.id} placed by user {identity.id}: "
            f"{CartService.item_count(cart)} item(s), {CartService.format_amount(bill_amount)} "
            f"via {payment_method.value}"
        )
        return order

    @staticmethod
    def _create_items_snapshot(cart: Cart) -> str:
        """
        JSON snapshot of the priced cart lines for order history.

        Example format:
            [
                {
                    "lineId": "3f2a...",
                    "itemId": 1,
                    "name": "Margherita Pizza",
                    "unitPrice": "339",
                    "quantity": 2,
                    "lineTotal": "678",
                    "customization": {"selections": {"extra_toppings": ["cheese", "olives"]}}
                },
                ...
            ]
        """
        snapshot = []
        for line in cart.lines:
            entry = {
                'lineId': line.line_id,
                'itemId': line.item_id,
                'name': line.item.name,
                'image': line.item.image,
                'unitPrice': str(CartService.unit_price(line)),
                'quantity': line.quantity,
                'lineTotal': str(CartService.price_line(line)),
            }
            if line.customization is not None:
                entry['customization'] = line.customization.to_record().model_dump(
                    mode="json", by_alias=True, exclude_none=True
                )
            snapshot.append(entry)
        return json.dumps(snapshot)

    @staticmethod
    def get_order_items(order: OrderDTO) -> list[dict]:
        """Decode an order's items snapshot; an unreadable snapshot yields no items."""
        try:
            items = json.loads(order.items or "[]")
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse items snapshot of order {order.id}: {e}")
            return []
        return items if isinstance(items, list) else []

    @staticmethod
    async def get_user_orders(user_id: str, session: AsyncSession | Session) -> list[OrderDTO]:
        return await OrderRepository.get_by_user_id(user_id, session)

    @staticmethod
    async def get_all_orders(session: AsyncSession | Session, limit: int | None = None) -> list[OrderDTO]:
        return await OrderRepository.get_all(session, limit)

    @staticmethod
    async def update_status(order_id: int, status: OrderStatus, session: AsyncSession | Session) -> OrderDTO:
        """
        Raises:
            OrderNotFoundException: If the order doesn't exist
        """
        order = await OrderRepository.get_by_id(order_id, session)
        if order is None:
            raise OrderNotFoundException(order_id)
        await OrderRepository.update_status(order_id, status, session)
        await session_commit(session)
        return order.model_copy(update={"status": status})
