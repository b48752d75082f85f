from typing import Any, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select, update

from app.models.shipment import Shipment


class ShipmentRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **fields: Any) -> Shipment:
        sh = Shipment(**fields)
        self.session.add(sh)
        await self.session.commit()
        await self.session.refresh(sh)
        return sh

    async def update(self, id: str, **fields: Any) -> Shipment:
        stmt = (update(Shipment)
                .where(Shipment.id == id)
                .values(**fields)
                .returning(Shipment))
        try:
            result = await self.session.execute(stmt)
            sh = result.scalars().one_or_none()
            await self.session.commit()
        except SQLAlchemyError:
            # после IntegrityError сессия непригодна, откатываем, чтобы следующий update прошёл
            await self.session.rollback()
            raise
        if sh is None:
            raise LookupError(f"Shipment '{id}' not found")
        return sh

    async def get_by_tracking_number(self, tracking_number: str) -> Optional[Shipment]:
        return await self.session.scalar(
            select(Shipment).where(Shipment.tracking_number == tracking_number)
        )
