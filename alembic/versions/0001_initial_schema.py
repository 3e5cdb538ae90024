"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "reference_standards",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_reference_standards_name", "reference_standards", ["name"], unique=True)

    op.create_table(
        "reference_standard_rules",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("standard_id", sa.Integer(), nullable=False),
        sa.Column("parameter_key", sa.String(length=100), nullable=False),
        sa.Column("condition_type", sa.String(length=20), nullable=False),
        sa.Column("min_value", sa.Float(), nullable=True),
        sa.Column("max_value", sa.Float(), nullable=True),
        sa.Column("expected_text", sa.Text(), nullable=True),
        sa.Column("display_reference", sa.String(length=255), nullable=True),
        sa.ForeignKeyConstraint(["standard_id"], ["reference_standards.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_reference_standard_rules_standard_id", "reference_standard_rules", ["standard_id"], unique=False)
    op.create_index(
        "ix_reference_standard_rules_parameter_key", "reference_standard_rules", ["parameter_key"], unique=False
    )

    op.create_table(
        "parameter_definitions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("key", sa.String(length=100), nullable=False),
        sa.Column("label", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("unit", sa.String(length=50), nullable=True),
        sa.Column("method", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_parameter_definitions_key", "parameter_definitions", ["key"], unique=True)
    op.create_index("ix_parameter_definitions_category", "parameter_definitions", ["category"], unique=False)

    op.create_table(
        "samples",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("batch_code", sa.String(length=50), nullable=True),
        sa.Column("reference_standard_id", sa.Integer(), nullable=True),
        sa.Column("collection_date", sa.Date(), nullable=True),
        sa.Column("temperatura", sa.String(length=50), nullable=True),
        sa.Column("ph", sa.String(length=50), nullable=True),
        sa.Column("turbidez", sa.String(length=50), nullable=True),
        sa.Column("condutividade", sa.String(length=50), nullable=True),
        sa.Column("cor_aparente", sa.String(length=50), nullable=True),
        sa.Column("cloro_residual", sa.String(length=50), nullable=True),
        sa.Column("params", sa.Text(), nullable=True),
        sa.Column("results", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["reference_standard_id"], ["reference_standards.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_samples_code", "samples", ["code"], unique=True)
    op.create_index("ix_samples_batch_code", "samples", ["batch_code"], unique=False)
    op.create_index("ix_samples_reference_standard_id", "samples", ["reference_standard_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_samples_reference_standard_id", table_name="samples")
    op.drop_index("ix_samples_batch_code", table_name="samples")
    op.drop_index("ix_samples_code", table_name="samples")
    op.drop_table("samples")

    op.drop_index("ix_parameter_definitions_category", table_name="parameter_definitions")
    op.drop_index("ix_parameter_definitions_key", table_name="parameter_definitions")
    op.drop_table("parameter_definitions")

    op.drop_index("ix_reference_standard_rules_parameter_key", table_name="reference_standard_rules")
    op.drop_index("ix_reference_standard_rules_standard_id", table_name="reference_standard_rules")
    op.drop_table("reference_standard_rules")

    op.drop_index("ix_reference_standards_name", table_name="reference_standards")
    op.drop_table("reference_standards")
