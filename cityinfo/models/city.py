"""
CityInfo API: City and PointOfInterest SQLAlchemy Models
========================================================

What:  ORM models for the `cities` and `points_of_interest` tables.
How:   Inherit from the shared DeclarativeBase; Alembic reads them for migrations.
Who:   Used by both repositories. The relational repository persists them
       through an AsyncSession; the in-memory store keeps transient instances.
When:  Instantiated by the seed builders and when a point of interest is created.

Table Design:
    cities               (id PK, name, description)
    points_of_interest   (id PK, city_id FK → cities.id, name, description)

    One-to-many: a city exclusively owns its points of interest. Removing a
    point from City.points_of_interest deletes it (delete-orphan), and
    deleting a city cascades to its points.
"""

from typing import List, Optional

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cityinfo.database import Base


class City(Base):
    """
    A city exposed by the API.

    Lifecycle:
        Created by the seed step (or an administrator with database access).
        Never created or deleted through the public HTTP surface.
    """

    __tablename__ = "cities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Display name of the city",
    )

    description: Mapped[Optional[str]] = mapped_column(
        String(200),
        nullable=True,
        default=None,
    )

    # ── Owned Collection ──────────────────────────────────────────────────
    # order_by id keeps nested listings stable across both stores
    points_of_interest: Mapped[List["PointOfInterest"]] = relationship(
        back_populates="city",
        cascade="all, delete-orphan",
        order_by="PointOfInterest.id",
    )

    def __repr__(self) -> str:
        return f"<City(id={self.id}, name='{self.name}')>"


class PointOfInterest(Base):
    """
    A named, described place owned by exactly one city.

    Lifecycle:
        1. Created via POST (id = max existing + 1 in memory, identity column in SQL)
        2. Replaced via PUT or partially updated via PATCH
        3. Deleted via DELETE (triggers a notification)

    Invariant name != description is a validation rule, not a storage constraint.
    """

    __tablename__ = "points_of_interest"

    # sqlite_autoincrement: ids are never reused after a delete on SQLite
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    city_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("cities.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(50), nullable=False)

    description: Mapped[Optional[str]] = mapped_column(
        String(200),
        nullable=True,
        default=None,
    )

    city: Mapped["City"] = relationship(back_populates="points_of_interest")

    def __repr__(self) -> str:
        return (
            f"<PointOfInterest(id={self.id}, city_id={self.city_id}, "
            f"name='{self.name}')>"
        )
