"""create organization, volunteer, project and application tables

Revision ID: 3f1a9c2d7b10
Revises:
Create Date: 2026-10-19 10:12:41.207315

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# SQLModel persists enum member names
project_status_enum = sa.Enum(
    'DRAFT', 'PUBLISHED', 'IN_PROGRESS', 'COMPLETED', 'CANCELLED',
    name='projectstatus'
)
application_status_enum = sa.Enum(
    'PENDING', 'ACCEPTED', 'REJECTED', 'WITHDRAWN', 'COMPLETED',
    name='applicationstatus'
)


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'organization',
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(length=2000), nullable=False),
        sa.Column('id_organization', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id_organization')
    )
    op.create_index(op.f('ix_organization_name'), 'organization', ['name'], unique=False)
    op.create_index(op.f('ix_organization_email'), 'organization', ['email'], unique=True)

    op.create_table(
        'volunteer',
        sa.Column('first_name', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('last_name', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('id_volunteer', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id_volunteer')
    )
    op.create_index(op.f('ix_volunteer_email'), 'volunteer', ['email'], unique=True)

    op.create_table(
        'project',
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(length=3000), nullable=False),
        sa.Column('city', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('max_volunteers', sa.Integer(), nullable=False),
        sa.Column('status', project_status_enum, nullable=False),
        sa.Column('id_project', sa.Integer(), nullable=False),
        sa.Column('id_organization', sa.Integer(), nullable=False),
        sa.Column('application_deadline', sa.DateTime(timezone=True), nullable=False),
        sa.Column('current_volunteers', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('current_volunteers >= 0', name='ck_project_volunteers_floor'),
        sa.CheckConstraint(
            'current_volunteers <= max_volunteers', name='ck_project_volunteers_ceiling'
        ),
        sa.ForeignKeyConstraint(['id_organization'], ['organization.id_organization']),
        sa.PrimaryKeyConstraint('id_project')
    )
    op.create_index(op.f('ix_project_status'), 'project', ['status'], unique=False)
    op.create_index(op.f('ix_project_id_organization'), 'project', ['id_organization'], unique=False)

    op.create_table(
        'application',
        sa.Column('id_application', sa.Integer(), nullable=False),
        sa.Column('id_volunteer', sa.Integer(), nullable=False),
        sa.Column('id_project', sa.Integer(), nullable=False),
        sa.Column('status', application_status_enum, nullable=False),
        sa.Column('applied_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('review_notes', sqlmodel.sql.sqltypes.AutoString(length=500), nullable=True),
        sa.ForeignKeyConstraint(['id_project'], ['project.id_project']),
        sa.ForeignKeyConstraint(['id_volunteer'], ['volunteer.id_volunteer']),
        sa.PrimaryKeyConstraint('id_application'),
        sa.UniqueConstraint('id_volunteer', 'id_project', name='uq_application_volunteer_project')
    )
    op.create_index(op.f('ix_application_id_volunteer'), 'application', ['id_volunteer'], unique=False)
    op.create_index(op.f('ix_application_id_project'), 'application', ['id_project'], unique=False)
    op.create_index(op.f('ix_application_status'), 'application', ['status'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_application_status'), table_name='application')
    op.drop_index(op.f('ix_application_id_project'), table_name='application')
    op.drop_index(op.f('ix_application_id_volunteer'), table_name='application')
    op.drop_table('application')
    op.drop_index(op.f('ix_project_id_organization'), table_name='project')
    op.drop_index(op.f('ix_project_status'), table_name='project')
    op.drop_table('project')
    op.drop_index(op.f('ix_volunteer_email'), table_name='volunteer')
    op.drop_table('volunteer')
    op.drop_index(op.f('ix_organization_email'), table_name='organization')
    op.drop_index(op.f('ix_organization_name'), table_name='organization')
    op.drop_table('organization')
    application_status_enum.drop(op.get_bind(), checkfirst=True)
    project_status_enum.drop(op.get_bind(), checkfirst=True)
