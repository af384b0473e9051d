from __future__ import annotations

from typing import Any

from sqlalchemy import Integer, String, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.orm import Mapped, mapped_column

from scanner.domain.models import ProductDetails
from scanner.domain.ports import CatalogPort, CatalogQueryError
from scanner.repositories.base import Base

_SOURCE = "sql"


class InventoryItemORM(Base):
    __tablename__ = "inventario"

    # Spaltennamen entsprechen den Feldern des Remote-Katalogs
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    codigo: Mapped[str] = mapped_column(String, index=True, nullable=False)
    nombre: Mapped[str | None] = mapped_column(String, nullable=True)
    categoria: Mapped[str | None] = mapped_column(String, nullable=True)
    precio: Mapped[int | None] = mapped_column(Integer, nullable=True)
    cantidad: Mapped[int | None] = mapped_column(Integer, nullable=True)


class SQLCatalogRepository(CatalogPort):
    """Katalog in einer SQL-Datenbank (z.B. zentrale Inventar-DB)."""

    def __init__(self, database_url: str) -> None:
        self.engine = create_async_engine(database_url)
        self.async_session_maker = async_sessionmaker(self.engine, expire_on_commit=False)

    async def initialize(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def save(self, details: ProductDetails) -> None:
        async with self.async_session_maker() as session, session.begin():
            session.add(
                InventoryItemORM(
                    codigo=details.code,
                    nombre=details.name,
                    categoria=details.category,
                    precio=details.price,
                    cantidad=details.quantity,
                )
            )

    async def find_by_code(self, code: str, limit: int = 1) -> list[dict[str, Any]]:
        try:
            async with self.async_session_maker() as session:
                result = await session.execute(
                    select(InventoryItemORM)
                    .where(InventoryItemORM.codigo == code)
                    .order_by(InventoryItemORM.id)
                    .limit(limit)
                )
                return [
                    {
                        "codigo": row.codigo,
                        "nombre": row.nombre,
                        "categoria": row.categoria,
                        "precio": row.precio,
                        "cantidad": row.cantidad,
                    }
                    for row in result.scalars()
                ]
        except SQLAlchemyError as e:
            raise CatalogQueryError(_SOURCE, str(e)) from e
