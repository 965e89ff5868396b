"""Initial migration

Revision ID: 001
Revises: 
Create Date: 2026-01-05 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create employees table
    op.create_table('employees',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('employee_id', sa.String(length=50), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=True, default=''),
        sa.Column('email', sa.String(length=120), nullable=True),
        sa.Column('job_title', sa.String(length=100), nullable=True),
        sa.Column('date_of_joining', sa.Date(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True, default=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_employees_id'), 'employees', ['id'], unique=False)
    op.create_index(op.f('ix_employees_employee_id'), 'employees', ['employee_id'], unique=True)

    # Create attendance_days table
    op.create_table('attendance_days',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('employee_id', sa.Integer(), nullable=False),
        sa.Column('day', sa.DateTime(), nullable=False),
        sa.Column('intervals', sa.JSON(), nullable=True),
        sa.Column('total_seconds', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=True, default=False),
        sa.Column('is_night_work', sa.Boolean(), nullable=True, default=False),
        sa.Column('forgot_to_check_out', sa.Boolean(), nullable=True, default=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['employee_id'], ['employees.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('employee_id', 'day', name='uix_attendance_employee_day')
    )
    op.create_index(op.f('ix_attendance_days_id'), 'attendance_days', ['id'], unique=False)
    op.create_index(op.f('ix_attendance_days_employee_id'), 'attendance_days', ['employee_id'], unique=False)
    op.create_index(op.f('ix_attendance_days_day'), 'attendance_days', ['day'], unique=False)

    # Create attendance_periods table
    op.create_table('attendance_periods',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('attendance_day_id', sa.Integer(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('start_time', sa.DateTime(), nullable=True),
        sa.Column('end_time', sa.DateTime(), nullable=True),
        sa.Column('checkout_type', sa.String(length=20), nullable=True, default='manual'),
        sa.Column('check_in_location', sa.JSON(), nullable=True),
        sa.Column('check_out_location', sa.JSON(), nullable=True),
        sa.ForeignKeyConstraint(['attendance_day_id'], ['attendance_days.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_attendance_periods_id'), 'attendance_periods', ['id'], unique=False)

    # Create timesheet_imports table
    op.create_table('timesheet_imports',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('import_key', sa.String(length=50), nullable=False),
        sa.Column('date_range_start', sa.String(length=10), nullable=True),
        sa.Column('date_range_end', sa.String(length=10), nullable=True),
        sa.Column('employees', sa.JSON(), nullable=False),
        sa.Column('employee_list', sa.JSON(), nullable=False),
        sa.Column('updated_employees', sa.JSON(), nullable=False),
        sa.Column('is_loaded', sa.Boolean(), nullable=True, default=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('import_key')
    )
    op.create_index(op.f('ix_timesheet_imports_id'), 'timesheet_imports', ['id'], unique=False)

    # Create suspect_days table
    op.create_table('suspect_days',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('employee_id', sa.String(length=50), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('employee_id', 'date', name='uix_suspect_employee_date')
    )
    op.create_index(op.f('ix_suspect_days_id'), 'suspect_days', ['id'], unique=False)
    op.create_index(op.f('ix_suspect_days_employee_id'), 'suspect_days', ['employee_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_suspect_days_employee_id'), table_name='suspect_days')
    op.drop_index(op.f('ix_suspect_days_id'), table_name='suspect_days')
    op.drop_table('suspect_days')
    op.drop_index(op.f('ix_timesheet_imports_id'), table_name='timesheet_imports')
    op.drop_table('timesheet_imports')
    op.drop_index(op.f('ix_attendance_periods_id'), table_name='attendance_periods')
    op.drop_table('attendance_periods')
    op.drop_index(op.f('ix_attendance_days_day'), table_name='attendance_days')
    op.drop_index(op.f('ix_attendance_days_employee_id'), table_name='attendance_days')
    op.drop_index(op.f('ix_attendance_days_id'), table_name='attendance_days')
    op.drop_table('attendance_days')
    op.drop_index(op.f('ix_employees_employee_id'), table_name='employees')
    op.drop_index(op.f('ix_employees_id'), table_name='employees')
    op.drop_table('employees')
