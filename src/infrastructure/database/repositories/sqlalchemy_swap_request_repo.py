"""SQLAlchemy implementation of SwapRequest repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.swap_request import SwapRequest, SwapRequestStatus
from infrastructure.database.models import SwapRequestModel


class SQLAlchemySwapRequestRepository:
    """SQLAlchemy implementation of ISwapRequestRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, request: SwapRequest) -> SwapRequest:
        """Insert a new swap request."""
        model = self._to_model(request)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def get(self, id: UUID) -> SwapRequest | None:
        """Get a swap request by id, bypassing any stale identity-map copy."""
        stmt = (
            select(SwapRequestModel)
            .where(SwapRequestModel.id == id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_for_user(
        self,
        user_id: UUID,
        status: SwapRequestStatus | None = None,
    ) -> list[SwapRequest]:
        """Get requests where the user is sender or recipient, newest first."""
        stmt = select(SwapRequestModel).where(
            or_(
                SwapRequestModel.from_user_id == user_id,
                SwapRequestModel.to_user_id == user_id,
            )
        )
        if status is not None:
            stmt = stmt.where(SwapRequestModel.status == status.value)
        stmt = stmt.order_by(SwapRequestModel.created_at.desc())

        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def list_all(self) -> list[SwapRequest]:
        """Get every request, newest first."""
        stmt = select(SwapRequestModel).order_by(SwapRequestModel.created_at.desc())
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def transition_status(
        self,
        id: UUID,
        from_status: SwapRequestStatus,
        to_status: SwapRequestStatus,
    ) -> SwapRequest | None:
        """Change status only if the row is still in ``from_status``."""
        stmt = (
            update(SwapRequestModel)
            .where(
                SwapRequestModel.id == id,
                SwapRequestModel.status == from_status.value,
            )
            .values(status=to_status.value, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        if not result.rowcount:  # type: ignore[attr-defined]
            return None
        return await self.get(id)

    async def delete(self, id: UUID, only_status: SwapRequestStatus | None = None) -> bool:
        """Delete a request, optionally only while it has ``only_status``."""
        stmt = delete(SwapRequestModel).where(SwapRequestModel.id == id)
        if only_status is not None:
            stmt = stmt.where(SwapRequestModel.status == only_status.value)
        stmt = stmt.execution_options(synchronize_session=False)

        result = await self._session.execute(stmt)
        await self._session.flush()
        return bool(result.rowcount)  # type: ignore[attr-defined]

    async def delete_for_user(self, user_id: UUID) -> int:
        """Delete every request referencing the user on either side."""
        stmt = (
            delete(SwapRequestModel)
            .where(
                or_(
                    SwapRequestModel.from_user_id == user_id,
                    SwapRequestModel.to_user_id == user_id,
                )
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount  # type: ignore[attr-defined, no-any-return]

    async def count(self) -> int:
        """Count all requests."""
        result = await self._session.execute(
            select(func.count()).select_from(SwapRequestModel)
        )
        return int(result.scalar_one())

    def _to_entity(self, model: SwapRequestModel) -> SwapRequest:
        """Convert ORM model to domain entity."""
        return SwapRequest(
            id=model.id,
            from_user_id=model.from_user_id,
            from_user_name=model.from_user_name,
            to_user_id=model.to_user_id,
            to_user_name=model.to_user_name,
            message=model.message,
            status=SwapRequestStatus(model.status),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: SwapRequest) -> SwapRequestModel:
        """Convert domain entity to ORM model."""
        return SwapRequestModel(
            id=entity.id,
            from_user_id=entity.from_user_id,
            from_user_name=entity.from_user_name,
            to_user_id=entity.to_user_id,
            to_user_name=entity.to_user_name,
            message=entity.message,
            status=entity.status.value,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
