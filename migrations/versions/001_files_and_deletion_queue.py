"""Create files and deletion_queue tables

Revision ID: 001_files_and_deletion_queue
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_files_and_deletion_queue"
down_revision: Union[str, None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the files table with its S3 object URL and the deletion queue."""
    op.create_table(
        "files",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("subtype", sa.String(), nullable=False),
        sa.Column("filename", sa.String(), nullable=True),
        sa.Column("local_filename", sa.String(), nullable=False),
        sa.Column("mime_type", sa.String(), nullable=True),
        sa.Column("aws_object_url", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_files_id", "files", ["id"])
    op.create_index("ix_files_owner_id", "files", ["owner_id"])
    op.create_index("ix_files_subtype", "files", ["subtype"])
    op.create_index("ix_files_aws_object_url", "files", ["aws_object_url"])
    op.create_index("ix_files_created_at", "files", ["created_at"])

    op.create_table(
        "deletion_queue",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("payload", sa.Text(), nullable=True),
        sa.Column("enqueued_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_deletion_queue_id", "deletion_queue", ["id"])


def downgrade() -> None:
    """Drop the deletion queue and files tables."""
    op.drop_index("ix_deletion_queue_id", table_name="deletion_queue")
    op.drop_table("deletion_queue")
    for index in ("ix_files_created_at", "ix_files_aws_object_url", "ix_files_subtype", "ix_files_owner_id", "ix_files_id"):
        op.drop_index(index, table_name="files")
    op.drop_table("files")
