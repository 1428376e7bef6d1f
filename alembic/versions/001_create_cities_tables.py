"""Create cities and points_of_interest tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `cities` and `points_of_interest` tables and inserts the
       seed rows (New York City, Antwerp and Antwerp's two points of interest).
How:   Explicit seed ids; on PostgreSQL the id sequences are moved past them
       so the next point of interest gets id 4.

Rollback: downgrade() drops both tables (all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    cities = op.create_table(
        "cities",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "name",
            sa.String(50),
            nullable=False,
            comment="Display name of the city",
        ),
        sa.Column("description", sa.String(200), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    points_of_interest = op.create_table(
        "points_of_interest",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("city_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("description", sa.String(200), nullable=True),
        sa.ForeignKeyConstraint(["city_id"], ["cities.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )

    # Nested listings filter on city_id
    op.create_index(
        "ix_points_of_interest_city_id",
        "points_of_interest",
        ["city_id"],
    )

    op.bulk_insert(
        cities,
        [
            {
                "id": 1,
                "name": "New York City",
                "description": "The one with that big park.",
            },
            {
                "id": 2,
                "name": "Antwerp",
                "description": "The one with the cathedral that was never really finished.",
            },
        ],
    )
    op.bulk_insert(
        points_of_interest,
        [
            {
                "id": 1,
                "city_id": 2,
                "name": "Cathedral",
                "description": "A Gothic style cathedral, conceived by architects Jan and Pieter Appelmans.",
            },
            {
                "id": 3,
                "city_id": 2,
                "name": "Antwerp Central Station",
                "description": "The finest example of railway architecture in Belgium.",
            },
        ],
    )

    if op.get_bind().dialect.name == "postgresql":
        for table in ("cities", "points_of_interest"):
            op.execute(
                f"SELECT setval(pg_get_serial_sequence('{table}', 'id'), "
                f"(SELECT MAX(id) FROM {table}))"
            )


def downgrade() -> None:
    """Drop both tables, children first."""
    op.drop_index("ix_points_of_interest_city_id", table_name="points_of_interest")
    op.drop_table("points_of_interest")
    op.drop_table("cities")
