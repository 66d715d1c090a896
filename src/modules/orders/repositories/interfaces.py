"""Order repository interface.

Extends ``IRepository[Order]`` with the look-ups the production lifecycle
needs: row locking for transitions, history appends, department queues
and the filtered order list.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.accounts.dtos import ActorDTO
    from modules.orders.dtos import OrderFilterDTO
    from modules.orders.models import Order, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The aggregate includes its ``OrderStatusHistory`` rows. A status write
    and its history entry must land in the same transaction.
    """

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Insert a new order row from validated field values."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve a live order with a row-level lock (SELECT FOR UPDATE)."""

    @abstractmethod
    def add_history(
        self,
        order: Order,
        status: str,
        actor: ActorDTO,
        notes: str = "",
    ) -> OrderStatusHistory:
        """Append the next history entry of ``order``."""

    @abstractmethod
    def search(self, filters: Optional[OrderFilterDTO] = None) -> List[Order]:
        """Order list look-up (newest ``order_date`` first)."""

    @abstractmethod
    def with_statuses(self, statuses: Iterable[str]) -> List[Order]:
        """Live orders whose status is one of ``statuses``."""

    @abstractmethod
    def count_by_status(self) -> Dict[str, int]:
        """Number of live orders per status."""
