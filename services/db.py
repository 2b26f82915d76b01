"""
services/db.py
────────────────────────────────────────────────────────────────────────
* Async SQLAlchemy v2 engine helpers (SQLite via aiosqlite by default)
* ORM models that map to the two local tables, `meals` and `foods`
* Idempotent schema setup, including the additive `quantity` upgrade
"""
from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy import REAL, Connection, ForeignKey, Integer, Text, event, inspect, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncAttrs,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

_LOG = logging.getLogger(__name__)

# ───────── connection helper ────────────────────────────────────────


def _ensure_sqlite_dir(database_url: str) -> None:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return
    if url.database and url.database != ":memory:":
        Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)


def create_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    _ensure_sqlite_dir(database_url)
    eng = create_async_engine(database_url, echo=echo)

    if eng.dialect.name == "sqlite":
        # SQLite ignores ON DELETE CASCADE unless asked, per connection
        @event.listens_for(eng.sync_engine, "connect")
        def _fk_on(dbapi_conn, _record) -> None:  # type: ignore[no-untyped-def]
            cur = dbapi_conn.cursor()
            cur.execute("PRAGMA foreign_keys = ON")
            cur.close()

    return eng


def session_factory(eng: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(eng, expire_on_commit=False)


# ───────── declarative base ──────────────────────────────────────────
Base = declarative_base(cls=AsyncAttrs)

# ───────── models (column names are the on-disk names) ──────────────


class MealRow(Base):
    __tablename__ = "meals"

    id:             Mapped[str]   = mapped_column(Text, primary_key=True)
    date:           Mapped[str]   = mapped_column(Text, nullable=False)   # ISO-8601
    total_calories: Mapped[float] = mapped_column("totalCalories", REAL, nullable=False)
    total_proteins: Mapped[float] = mapped_column("totalProteins", REAL, nullable=False)
    total_fats:     Mapped[float] = mapped_column("totalFats", REAL, nullable=False)
    total_carbs:    Mapped[float] = mapped_column("totalCarbs", REAL, nullable=False)


class FoodRow(Base):
    __tablename__ = "foods"
    __table_args__ = {"sqlite_autoincrement": True}

    id:       Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    meal_id:  Mapped[str] = mapped_column(
        "mealId", Text, ForeignKey("meals.id", ondelete="CASCADE"), nullable=False
    )
    food_id:  Mapped[str] = mapped_column("foodId", Text, nullable=False)
    label:    Mapped[str] = mapped_column(Text, nullable=False)
    image:    Mapped[str | None] = mapped_column(Text, nullable=True)
    calories: Mapped[float] = mapped_column(REAL, nullable=False)
    proteins: Mapped[float] = mapped_column(REAL, nullable=False)
    fats:     Mapped[float] = mapped_column(REAL, nullable=False)
    carbs:    Mapped[float] = mapped_column(REAL, nullable=False)
    quantity: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1, server_default=text("1")
    )


# ───────── schema setup ──────────────────────────────────────────────
QUANTITY_DDL = "ALTER TABLE foods ADD COLUMN quantity INTEGER NOT NULL DEFAULT 1"


def column_names(conn: Connection, table: str) -> set[str]:
    return {col["name"] for col in inspect(conn).get_columns(table)}


def create_schema(conn: Connection) -> None:
    """Create missing tables, then add `foods.quantity` on older files.

    Runs inside `AsyncConnection.run_sync`; safe to call on every start.
    """
    Base.metadata.create_all(conn, checkfirst=True)

    if "quantity" not in column_names(conn, FoodRow.__tablename__):
        _LOG.info("foods.quantity missing – upgrading schema")
        conn.exec_driver_sql(QUANTITY_DDL)
