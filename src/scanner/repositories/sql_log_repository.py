from __future__ import annotations

from sqlalchemy import BigInteger, Integer, String, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.orm import Mapped, mapped_column

from scanner.domain.models import LogEntry
from scanner.domain.ports import LogSinkPort, LogWriteError
from scanner.repositories.base import Base

_SOURCE = "sql"


class CodeLogORM(Base):
    __tablename__ = "code_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String, index=True, nullable=False)
    value: Mapped[str] = mapped_column(String, nullable=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)


class SQLLogRepository(LogSinkPort):
    """Append-only Log-Senke in einer SQL-Tabelle."""

    def __init__(self, database_url: str, key: str = "codigo") -> None:
        self.engine = create_async_engine(database_url)
        self.async_session_maker = async_sessionmaker(self.engine, expire_on_commit=False)
        self._key = key

    async def initialize(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def write(self, entry: LogEntry) -> None:
        try:
            async with self.async_session_maker() as session, session.begin():
                session.add(CodeLogORM(key=self._key, value=entry.value, timestamp=entry.timestamp))
        except SQLAlchemyError as e:
            raise LogWriteError(_SOURCE, str(e)) from e

    async def find_all(self) -> list[LogEntry]:
        """Nur für Audits und Tests; die Pipeline liest die Senke nie."""
        async with self.async_session_maker() as session:
            result = await session.execute(
                select(CodeLogORM).where(CodeLogORM.key == self._key).order_by(CodeLogORM.id)
            )
            return [LogEntry(value=row.value, timestamp=row.timestamp) for row in result.scalars()]
