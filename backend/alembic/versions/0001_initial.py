"""initial CitiCare schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

# SQLAlchemy's Enum stores member names
user_role = sa.Enum("ADMIN", "DEPARTMENT_HEAD", "OFFICER", "CITIZEN", name="userrole")
complaint_status = sa.Enum(
    "PENDING",
    "IN_PROGRESS",
    "ON_HOLD",
    "RESOLVED",
    "REJECTED",
    "CLOSED",
    name="complaintstatus",
)
priority_level = sa.Enum("LOW", "MEDIUM", "HIGH", "URGENT", name="prioritylevel")
cost_status = sa.Enum("PENDING", "SUBMITTED", "APPROVED", "REJECTED", name="coststatus")
acceptance_decision = sa.Enum(
    "UNDECIDED", "ACCEPTED", "REJECTED", name="acceptancedecision"
)
image_phase = sa.Enum("BEFORE", "AFTER", "GENERAL", name="imagephase")


def upgrade():
    op.create_table(
        "departments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
        sa.UniqueConstraint("code"),
    )
    op.create_index("ix_departments_id", "departments", ["id"], unique=False)

    op.create_table(
        "zones",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.create_index("ix_zones_id", "zones", ["id"], unique=False)

    op.create_table(
        "wards",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("zone_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["zone_id"], ["zones.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.create_index("ix_wards_id", "wards", ["id"], unique=False)
    op.create_index("ix_wards_zone_id", "wards", ["zone_id"], unique=False)

    op.create_table(
        "areas",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("ward_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["ward_id"], ["wards.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.create_index("ix_areas_id", "areas", ["id"], unique=False)
    op.create_index("ix_areas_ward_id", "areas", ["ward_id"], unique=False)

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("hashed_password", sa.String(), nullable=False),
        sa.Column("full_name", sa.String(length=120), nullable=False),
        sa.Column("phone", sa.String(length=30), nullable=True),
        sa.Column("avatar_url", sa.String(), nullable=True),
        sa.Column("role", user_role, nullable=False),
        sa.Column("department_id", sa.Integer(), nullable=True),
        sa.Column("notification_email", sa.Boolean(), nullable=False),
        sa.Column("notification_push", sa.Boolean(), nullable=False),
        sa.Column("notification_status_updates", sa.Boolean(), nullable=False),
        sa.Column("notification_comments", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["department_id"], ["departments.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_id", "users", ["id"], unique=False)
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_department_id", "users", ["department_id"], unique=False)

    op.create_table(
        "complaint_counters",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("seq", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "complaints",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("complaint_number", sa.String(length=20), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=50), nullable=False),
        sa.Column("status", complaint_status, nullable=False),
        sa.Column("priority", priority_level, nullable=False),
        sa.Column("department_id", sa.Integer(), nullable=True),
        sa.Column("assigned_to", sa.Integer(), nullable=True),
        sa.Column("zone_id", sa.Integer(), nullable=True),
        sa.Column("ward_id", sa.Integer(), nullable=True),
        sa.Column("area_id", sa.Integer(), nullable=True),
        sa.Column("address", sa.String(length=300), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.Column("resolved_at", sa.DateTime(), nullable=True),
        sa.Column("acceptance", acceptance_decision, nullable=False),
        sa.Column("accepted_at", sa.DateTime(), nullable=True),
        sa.Column("cost_estimated_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("cost_materials", sa.Text(), nullable=True),
        sa.Column("cost_labor", sa.Text(), nullable=True),
        sa.Column("cost_status", cost_status, nullable=False),
        sa.Column("cost_submitted_at", sa.DateTime(), nullable=True),
        sa.Column("cost_approved_by", sa.Integer(), nullable=True),
        sa.Column("completion_remarks", sa.Text(), nullable=True),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["department_id"], ["departments.id"]),
        sa.ForeignKeyConstraint(["assigned_to"], ["users.id"]),
        sa.ForeignKeyConstraint(["zone_id"], ["zones.id"]),
        sa.ForeignKeyConstraint(["ward_id"], ["wards.id"]),
        sa.ForeignKeyConstraint(["area_id"], ["areas.id"]),
        sa.ForeignKeyConstraint(["cost_approved_by"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_complaints_id", "complaints", ["id"], unique=False)
    op.create_index(
        "ix_complaints_complaint_number",
        "complaints",
        ["complaint_number"],
        unique=True,
    )
    op.create_index("ix_complaints_user_id", "complaints", ["user_id"], unique=False)
    op.create_index("ix_complaints_category", "complaints", ["category"], unique=False)
    op.create_index(
        "ix_complaints_department_id", "complaints", ["department_id"], unique=False
    )
    op.create_index(
        "ix_complaints_department_created",
        "complaints",
        ["department_id", "created_at"],
        unique=False,
    )
    op.create_index(
        "ix_complaints_user_created",
        "complaints",
        ["user_id", "created_at"],
        unique=False,
    )

    op.create_table(
        "complaint_images",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("complaint_id", sa.Integer(), nullable=False),
        sa.Column("url", sa.String(), nullable=False),
        sa.Column("caption", sa.String(length=300), nullable=True),
        sa.Column("phase", image_phase, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["complaint_id"], ["complaints.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_complaint_images_id", "complaint_images", ["id"], unique=False)
    op.create_index(
        "ix_complaint_images_complaint_id",
        "complaint_images",
        ["complaint_id"],
        unique=False,
    )

    op.create_table(
        "complaint_comments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("complaint_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_internal", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["complaint_id"], ["complaints.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_complaint_comments_id", "complaint_comments", ["id"], unique=False
    )
    op.create_index(
        "ix_complaint_comments_complaint_id",
        "complaint_comments",
        ["complaint_id"],
        unique=False,
    )

    op.create_table(
        "system_settings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("key", sa.String(length=100), nullable=False),
        sa.Column("value", sa.String(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("key"),
    )
    op.create_index("ix_system_settings_id", "system_settings", ["id"], unique=False)

    op.create_table(
        "documents",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(length=50), nullable=True),
        sa.Column("file_url", sa.String(), nullable=False),
        sa.Column("file_type", sa.String(length=100), nullable=True),
        sa.Column("file_size", sa.Integer(), nullable=True),
        sa.Column("uploaded_by", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["uploaded_by"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_documents_id", "documents", ["id"], unique=False)

    op.create_table(
        "projects",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("department_id", sa.Integer(), nullable=True),
        sa.Column("ward_id", sa.Integer(), nullable=True),
        sa.Column("created_by", sa.Integer(), nullable=True),
        sa.Column("budget", sa.Numeric(14, 2), nullable=True),
        sa.Column("progress", sa.Integer(), nullable=True),
        sa.Column("start_date", sa.DateTime(), nullable=True),
        sa.Column("end_date", sa.DateTime(), nullable=True),
        sa.Column("status", sa.String(length=30), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["department_id"], ["departments.id"]),
        sa.ForeignKeyConstraint(["ward_id"], ["wards.id"]),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_projects_id", "projects", ["id"], unique=False)

    # Counter row used by complaint numbering
    op.execute("INSERT INTO complaint_counters (id, seq) VALUES (1, 0)")


def downgrade():
    # Children before parents
    op.drop_table("projects")
    op.drop_table("documents")
    op.drop_table("system_settings")
    op.drop_table("complaint_comments")
    op.drop_table("complaint_images")
    op.drop_table("complaints")
    op.drop_table("complaint_counters")
    op.drop_table("users")
    op.drop_table("areas")
    op.drop_table("wards")
    op.drop_table("zones")
    op.drop_table("departments")

    bind = op.get_bind()
    for enum_type in (
        user_role,
        complaint_status,
        priority_level,
        cost_status,
        acceptance_decision,
        image_phase,
    ):
        enum_type.drop(bind, checkfirst=True)
