"""
Module: stock_kernel.db.base
Responsibility: Declarative base classes for all SQLAlchemy ORM models.
    Provides the UUID primary key convention and the type annotation map for
    consistent column types.
Architecture position: Kernel > DB.  ALL ORM model files import from here.
    This module MUST NOT import from store/, domain/, or outer layers.

Invariants enforced:
    - UUID primary keys on every table.
    - Decimal maps to Numeric(38, 9).  NEVER use float for monetary amounts.
    - datetime maps to a UTC-normalizing timezone-aware column.
    - ``created_at``/``updated_at`` come from the injected Clock through the
      DTO, never from the database server, so both stores agree on values.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar
from uuid import UUID as PyUUID, uuid4

from sqlalchemy import Integer, Numeric
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from stock_kernel.db.types import UTCDateTime, UUIDString


class Base(DeclarativeBase):
    """
    Declarative base for all SQLAlchemy models.

    Guarantees:
        - id is a UUID stored as String(36).
        - Decimal maps to Numeric(38, 9).
        - datetime maps to UTCDateTime.
    """

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(38, 9),
        datetime: UTCDateTime(),
        PyUUID: UUIDString(),
        int: Integer,
    }

    id: Mapped[PyUUID] = mapped_column(
        UUIDString(),
        primary_key=True,
        default=uuid4,
    )


class AggregateBase(Base):
    """
    Abstract base for aggregate roots stored through a repository.

    Contract:
        Concrete subclasses MUST override ``to_dto()`` and ``from_dto()``;
        a mapped subclass missing either is refused with ``TypeError`` at
        class creation, before SQLAlchemy maps it.  ``__list_order__`` names
        the columns ``list()`` orders by.
    """

    __abstract__ = True

    __list_order__: ClassVar[tuple[str, ...]] = ("id",)

    _DTO_HOOKS: ClassVar[tuple[str, ...]] = ("to_dto", "from_dto")

    def __init_subclass__(cls, **kwargs: Any) -> None:
        if not cls.__dict__.get("__abstract__", False):
            own = cls.__mro__[: cls.__mro__.index(AggregateBase)]
            missing = [
                name for name in cls._DTO_HOOKS
                if not any(name in vars(klass) for klass in own)
            ]
            if missing:
                raise TypeError(
                    f"{cls.__name__} must override {', '.join(missing)}"
                )
        super().__init_subclass__(**kwargs)

    def to_dto(self) -> Any:
        """Required override: the frozen DTO for this row."""

    @classmethod
    def from_dto(cls, dto: Any) -> "AggregateBase":
        """Required override: a row (with children) built from ``dto``."""


# Re-export UUID for convenience
UUID = PyUUID
