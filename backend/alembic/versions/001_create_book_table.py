"""Create book table

Revision ID: 001
Revises: None
Create Date: 2024-04-07 16:01:05.000000+00:00

What:  Creates the `book` table holding every book record.
How:   Integer autoincrement primary key; on SQLite the AUTOINCREMENT keyword
       is emitted so ids of deleted rows are never reused.

Rollback: downgrade() drops the table entirely (destructive — all data lost).
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
    """Create the book table; column definitions mirror bookshelf/models/book.py."""
    op.create_table(
        "book",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("author", sa.String(255), nullable=False),
        sa.Column("publication_year", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )


def downgrade() -> None:
    """Drop the book table. WARNING: all book data is permanently lost."""
    op.drop_table("book")
