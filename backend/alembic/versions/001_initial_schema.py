"""Initial schema (files).

Revision ID: 001
Revises:
Create Date: 2025-09-21

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "files",
        sa.Column("id", sa.BigInteger(), sa.Identity(), nullable=False),
        sa.Column("attachment_uuid", sa.String(length=50), nullable=False),
        sa.Column("directory", sa.String(length=400), nullable=True),
        sa.Column("file_url", sa.String(length=512), nullable=False),
        sa.Column("file_type", sa.String(length=240), nullable=True),
        sa.Column("file_name", sa.String(length=240), nullable=True),
        sa.Column("file_size", sa.BigInteger(), nullable=True),
        sa.Column("bucket_name", sa.String(length=63), nullable=True),
        sa.Column("source_type", sa.String(length=60), nullable=True),
        sa.Column("is_encrypted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("encryption_algorithm", sa.String(length=20), nullable=True),
        sa.Column("created_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_time", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("uq_files_attachment_uuid", "files", ["attachment_uuid"], unique=True)
    op.create_index("uq_files_file_url", "files", ["file_url"], unique=True)


def downgrade() -> None:
    op.drop_index("uq_files_file_url", table_name="files")
    op.drop_index("uq_files_attachment_uuid", table_name="files")
    op.drop_table("files")
