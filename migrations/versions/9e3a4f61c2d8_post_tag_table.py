"""store post tags as rows

Revision ID: 9e3a4f61c2d8
Revises: 5b1d2c7e9a01
Create Date: 2026-10-19 14:30:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "9e3a4f61c2d8"
down_revision: Union[str, Sequence[str], None] = "5b1d2c7e9a01"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

post_table = sa.table("post", sa.column("id", sa.Integer()), sa.column("tags", sa.JSON()))
post_tag_table = sa.table(
    "post_tag",
    sa.column("post_id", sa.Integer()),
    sa.column("position", sa.Integer()),
    sa.column("tag", sa.Text()),
)


def upgrade() -> None:
    """Move the JSON tag list of each post into post_tag rows."""
    op.create_table(
        "post_tag",
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("tag", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["post.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("post_id", "position"),
        sa.UniqueConstraint("post_id", "tag", name="uq_post_tag_value"),
    )
    op.create_index("ix_post_tag_tag", "post_tag", ["tag"])

    bind = op.get_bind()
    rows = []
    for post_id, tags in bind.execute(sa.select(post_table.c.id, post_table.c.tags)):
        seen: dict[str, None] = {}
        for tag in tags or []:
            seen.setdefault(tag, None)
        rows.extend(
            {"post_id": post_id, "position": position, "tag": tag}
            for position, tag in enumerate(seen)
        )
    if rows:
        op.bulk_insert(post_tag_table, rows)

    with op.batch_alter_table("post") as batch_op:
        batch_op.drop_column("tags")


def downgrade() -> None:
    """Restore the JSON tag column from post_tag rows."""
    with op.batch_alter_table("post") as batch_op:
        batch_op.add_column(sa.Column("tags", sa.JSON(), nullable=False, server_default="[]"))

    bind = op.get_bind()
    tags: dict[int, list[str]] = {}
    query = sa.select(post_tag_table.c.post_id, post_tag_table.c.tag).order_by(
        post_tag_table.c.post_id, post_tag_table.c.position
    )
    for post_id, tag in bind.execute(query):
        tags.setdefault(post_id, []).append(tag)
    for post_id, values in tags.items():
        bind.execute(post_table.update().where(post_table.c.id == post_id).values(tags=values))

    op.drop_index("ix_post_tag_tag", table_name="post_tag")
    op.drop_table("post_tag")
