"""Initial schema: tenants, users, clients, action types, tasks, subtasks, activity, handoffs, privacy, audit log

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19

Tenant-scoped task tables get row-level security keyed on
app.current_tenant_id (set per session by get_db / get_db_transactional).
app_user and audit_log stay without RLS: login reads them before a tenant
context exists.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_RLS_TABLES = (
    "client",
    "task_action_type",
    "task",
    "subtask",
    "task_activity",
    "task_handoff",
    "user_privacy_settings",
)


def _json() -> sa.types.TypeEngine:
    return sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def _tenant_fk() -> sa.Column:
    return sa.Column(
        "tenant_id",
        sa.String(),
        sa.ForeignKey("tenant.id", ondelete="CASCADE"),
        nullable=False,
    )


def _user_fk(name: str, *, nullable: bool = True, ondelete: str = "SET NULL") -> sa.Column:
    return sa.Column(
        name, sa.String(), sa.ForeignKey("app_user.id", ondelete=ondelete), nullable=nullable
    )


def upgrade() -> None:
    """Create initial schema."""
    op.create_table(
        "tenant",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("code", sa.String(32), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('active', 'suspended', 'archived')", name="tenant_status_check"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_tenant_code"), "tenant", ["code"], unique=True)
    op.create_index(op.f("ix_tenant_status"), "tenant", ["status"], unique=False)

    op.create_table(
        "app_user",
        sa.Column("id", sa.String(), nullable=False),
        _tenant_fk(),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("full_name", sa.String(200), nullable=True),
        sa.Column("hashed_password", sa.String(), nullable=False),
        sa.Column("role", sa.String(16), server_default="staff", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column(
            "show_in_taskpool", sa.Boolean(), server_default=sa.text("true"), nullable=False
        ),
        sa.Column("department", sa.String(100), nullable=True),
        sa.Column("job_title", sa.String(100), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "role IN ('owner', 'admin', 'manager', 'staff')", name="app_user_role_check"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tenant_id", "email", name="uq_app_user_tenant_email"),
    )
    op.create_index(op.f("ix_app_user_tenant_id"), "app_user", ["tenant_id"], unique=False)

    op.create_table(
        "client",
        sa.Column("id", sa.String(), nullable=False),
        _tenant_fk(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("entity_type", sa.String(50), nullable=True),
        sa.Column("tax_id_last4", sa.String(4), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_client_tenant_id"), "client", ["tenant_id"], unique=False)
    op.create_index("ix_client_tenant_name", "client", ["tenant_id", "name"], unique=False)

    op.create_table(
        "task_action_type",
        sa.Column("id", sa.String(), nullable=False),
        _tenant_fk(),
        sa.Column("code", sa.String(32), nullable=False),
        sa.Column("label", sa.String(100), nullable=False),
        sa.Column("color", sa.String(7), nullable=False),
        sa.Column("icon", sa.String(50), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tenant_id", "code", name="uq_task_action_type_tenant_code"),
    )
    op.create_index(
        op.f("ix_task_action_type_tenant_id"), "task_action_type", ["tenant_id"], unique=False
    )

    op.create_table(
        "task",
        sa.Column("id", sa.String(), nullable=False),
        _tenant_fk(),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(16), server_default="open", nullable=False),
        sa.Column("priority", sa.String(16), server_default="medium", nullable=False),
        sa.Column("source_type", sa.String(32), server_default="manual", nullable=False),
        sa.Column("source_metadata", _json(), nullable=True),
        sa.Column("source_email_id", sa.String(), nullable=True),
        sa.Column(
            "action_type_id",
            sa.String(),
            sa.ForeignKey("task_action_type.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "client_id",
            sa.String(),
            sa.ForeignKey("client.id", ondelete="SET NULL"),
            nullable=True,
        ),
        _user_fk("assigned_to"),
        _user_fk("assigned_by"),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=True),
        _user_fk("claimed_by"),
        sa.Column("claimed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        _user_fk("created_by"),
        sa.Column(
            "routed_from_task_id",
            sa.String(),
            sa.ForeignKey("task.id", ondelete="SET NULL"),
            nullable=True,
        ),
        _user_fk("handoff_to"),
        _user_fk("handoff_from"),
        sa.Column("handoff_notes", sa.Text(), nullable=True),
        sa.Column("handoff_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('open', 'pending', 'in_progress', 'review', 'completed', 'cancelled')",
            name="task_status_check",
        ),
        sa.CheckConstraint(
            "priority IN ('low', 'medium', 'high', 'urgent')", name="task_priority_check"
        ),
        sa.CheckConstraint(
            "source_type IN ('manual', 'phone_call', 'email', 'document_intake', 'routed')",
            name="task_source_type_check",
        ),
        sa.CheckConstraint(
            "(status = 'completed') = (completed_at IS NOT NULL)",
            name="task_completed_at_check",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_task_tenant_id"), "task", ["tenant_id"], unique=False)
    op.create_index(op.f("ix_task_action_type_id"), "task", ["action_type_id"], unique=False)
    op.create_index(op.f("ix_task_client_id"), "task", ["client_id"], unique=False)
    op.create_index("ix_task_tenant_assigned_to", "task", ["tenant_id", "assigned_to"])
    op.create_index("ix_task_tenant_claimed_by", "task", ["tenant_id", "claimed_by"])
    op.create_index("ix_task_tenant_status", "task", ["tenant_id", "status"])
    op.create_index("ix_task_tenant_handoff_to", "task", ["tenant_id", "handoff_to"])
    op.create_index(
        "ix_task_pool",
        "task",
        ["tenant_id", "created_at"],
        postgresql_where=sa.text("assigned_to IS NULL AND claimed_by IS NULL"),
    )

    op.create_table(
        "subtask",
        sa.Column("id", sa.String(), nullable=False),
        _tenant_fk(),
        sa.Column(
            "task_id", sa.String(), sa.ForeignKey("task.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column(
            "is_completed", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        _user_fk("completed_by"),
        sa.Column("position", sa.Integer(), nullable=False),
        _user_fk("created_by"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_subtask_tenant_id"), "subtask", ["tenant_id"], unique=False)
    op.create_index("ix_subtask_task_position", "subtask", ["task_id", "position"])

    op.create_table(
        "task_activity",
        sa.Column("id", sa.String(), nullable=False),
        _tenant_fk(),
        sa.Column(
            "task_id", sa.String(), sa.ForeignKey("task.id", ondelete="CASCADE"), nullable=False
        ),
        _user_fk("user_id"),
        sa.Column("action", sa.String(32), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("old_value", sa.Text(), nullable=True),
        sa.Column("new_value", sa.Text(), nullable=True),
        sa.Column("details", _json(), nullable=True),
        _created_at(),
        sa.CheckConstraint(
            "action IN ('created', 'updated', 'status_changed', 'completed', 'reopened', "
            "'cancelled', 'assigned', 'unassigned', 'claimed', 'released', 'routed', "
            "'handed_off', 'handoff_accepted', 'subtask_added', 'subtask_completed', "
            "'subtask_uncompleted', 'subtask_deleted', 'comment')",
            name="task_activity_action_check",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_task_activity_tenant_id"), "task_activity", ["tenant_id"], unique=False
    )
    op.create_index("ix_task_activity_task_created", "task_activity", ["task_id", "created_at"])
    op.create_index("ix_task_activity_tenant_user", "task_activity", ["tenant_id", "user_id"])

    op.create_table(
        "task_handoff",
        sa.Column("id", sa.String(), nullable=False),
        _tenant_fk(),
        sa.Column(
            "task_id", sa.String(), sa.ForeignKey("task.id", ondelete="CASCADE"), nullable=False
        ),
        _user_fk("from_user_id"),
        _user_fk("to_user_id", nullable=False, ondelete="CASCADE"),
        sa.Column("notes", sa.Text(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_task_handoff_tenant_id"), "task_handoff", ["tenant_id"], unique=False
    )
    op.create_index("ix_task_handoff_task_created", "task_handoff", ["task_id", "created_at"])

    op.create_table(
        "user_privacy_settings",
        sa.Column("id", sa.String(), nullable=False),
        _tenant_fk(),
        _user_fk("user_id", nullable=False, ondelete="CASCADE"),
        sa.Column(
            "hide_tasks_from_peers", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column(
            "hide_activity_from_peers",
            sa.Boolean(),
            server_default=sa.text("false"),
            nullable=False,
        ),
        sa.Column(
            "hide_performance_from_peers",
            sa.Boolean(),
            server_default=sa.text("false"),
            nullable=False,
        ),
        sa.Column(
            "hide_calendar_from_peers",
            sa.Boolean(),
            server_default=sa.text("false"),
            nullable=False,
        ),
        sa.Column("visible_to_user_ids", _json(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tenant_id", "user_id", name="uq_user_privacy_settings_user"),
    )
    op.create_index(
        op.f("ix_user_privacy_settings_tenant_id"),
        "user_privacy_settings",
        ["tenant_id"],
        unique=False,
    )

    op.create_table(
        "audit_log",
        sa.Column("id", sa.String(), nullable=False),
        _tenant_fk(),
        _user_fk("user_id"),
        sa.Column("session_id", sa.String(64), nullable=True),
        sa.Column("action", sa.String(100), nullable=False),
        sa.Column("category", sa.String(32), nullable=False),
        sa.Column("severity", sa.String(16), nullable=False),
        sa.Column("resource_type", sa.String(100), nullable=False),
        sa.Column("resource_id", sa.String(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("old_values", _json(), nullable=True),
        sa.Column("new_values", _json(), nullable=True),
        sa.Column("details", _json(), nullable=True),
        sa.Column("ip_address", sa.String(64), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("request_id", sa.String(64), nullable=True),
        sa.Column(
            "timestamp",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column("success", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.CheckConstraint(
            "category IN ('authentication', 'client', 'task', 'user_management', "
            "'settings', 'system', 'security', 'api')",
            name="audit_log_category_check",
        ),
        sa.CheckConstraint(
            "severity IN ('info', 'warning', 'error', 'critical')",
            name="audit_log_severity_check",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_audit_log_user_id"), "audit_log", ["user_id"], unique=False)
    op.create_index("ix_audit_log_tenant_timestamp", "audit_log", ["tenant_id", "timestamp"])
    op.create_index(
        "ix_audit_log_tenant_session", "audit_log", ["tenant_id", "session_id", "timestamp"]
    )

    if op.get_bind().dialect.name == "postgresql":
        for table in _RLS_TABLES:
            op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY")
            op.execute(
                f"CREATE POLICY tenant_isolation ON {table} "
                "USING (tenant_id = current_setting('app.current_tenant_id', true)) "
                "WITH CHECK (tenant_id = current_setting('app.current_tenant_id', true))"
            )


def downgrade() -> None:
    """Drop all tables (reverse dependency order)."""
    if op.get_bind().dialect.name == "postgresql":
        for table in _RLS_TABLES:
            op.execute(f"DROP POLICY IF EXISTS tenant_isolation ON {table}")
            op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY")
    op.drop_table("audit_log")
    op.drop_table("user_privacy_settings")
    op.drop_table("task_handoff")
    op.drop_table("task_activity")
    op.drop_table("subtask")
    op.drop_table("task")
    op.drop_table("task_action_type")
    op.drop_table("client")
    op.drop_table("app_user")
    op.drop_table("tenant")
