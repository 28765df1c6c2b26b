"""Create devices, scenes and tests tables

Revision ID: 001
Revises: None
Create Date: 2026-10-16 00:00:00.000000+00:00

What:  Initial schema: one table per resource, keyed by 24-char hex ids.
       scenes.device_id and tests.scene_id are plain indexed strings; the
       services check the references, the store does not.

Rollback: downgrade() drops all three tables (destructive).
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _record_columns() -> list:
    return [
        sa.Column("id", sa.String(24), nullable=False, comment="24-character hex identifier"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "devices",
        *_record_columns(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("ip", sa.String(15), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("ip", name="uq_devices_ip"),
    )
    op.create_index("idx_devices_name", "devices", ["name"])
    op.create_index("idx_devices_created_at", "devices", ["created_at"])

    op.create_table(
        "scenes",
        *_record_columns(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("device_id", sa.String(24), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_scenes_name", "scenes", ["name"])
    op.create_index("idx_scenes_device_id", "scenes", ["device_id"])

    op.create_table(
        "tests",
        *_record_columns(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("scene_id", sa.String(24), nullable=False),
        sa.Column(
            "state",
            sa.String(8),
            nullable=False,
            server_default=sa.text("'inactive'"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("state IN ('active', 'inactive')", name="ck_tests_state"),
    )
    op.create_index("idx_tests_name", "tests", ["name"])
    op.create_index("idx_tests_scene_id", "tests", ["scene_id"])
    op.create_index("idx_tests_state", "tests", ["state"])
    op.create_index("idx_tests_scene_id_state", "tests", ["scene_id", "state"])


def downgrade() -> None:
    op.drop_table("tests")
    op.drop_table("scenes")
    op.drop_table("devices")
