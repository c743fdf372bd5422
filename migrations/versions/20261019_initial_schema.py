"""
Initial schema: auth accounts and sessions, admin profiles, the library
hierarchy, the book catalog and location index, scans, corrections, daily
analytics, system configuration and audit logs.
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = 'initial_20261019'
down_revision = None
branch_labels = None
depends_on = None


def _ts(name, nullable=True):
    return sa.Column(name, sa.DateTime(timezone=True), nullable=nullable)


def upgrade() -> None:
    op.create_table(
        'auth_accounts',
        sa.Column('uid', sa.String(64), primary_key=True),
        sa.Column('email', sa.String(320), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('display_name', sa.String(255), nullable=True),
        sa.Column('email_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('disabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('custom_claims', postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        _ts('created_at'),
        _ts('updated_at'),
    )
    op.create_index('ix_auth_accounts_email', 'auth_accounts', ['email'], unique=True)

    op.create_table(
        'auth_sessions',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('uid', sa.String(64), sa.ForeignKey('auth_accounts.uid', ondelete='CASCADE'), nullable=False),
        sa.Column('token_id', sa.String(64), nullable=False, unique=True),
        sa.Column('token_hash', sa.Text(), nullable=False),
        _ts('created_at', nullable=False),
        _ts('last_used_at'),
        _ts('expires_at', nullable=False),
        _ts('revoked_at'),
    )
    op.create_index('idx_auth_sessions_uid_created', 'auth_sessions', ['uid', 'created_at'])

    op.create_table(
        'admin_users',
        sa.Column('id', sa.String(64), sa.ForeignKey('auth_accounts.uid', ondelete='CASCADE'), primary_key=True),
        sa.Column('email', sa.String(320), nullable=False),
        sa.Column('display_name', sa.String(255), nullable=False, server_default=''),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('permissions', postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column('assigned_libraries', postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        _ts('last_login_at'),
        sa.Column('created_by', sa.String(64), nullable=True),
        _ts('created_at'),
        _ts('updated_at'),
        sa.CheckConstraint("role IN ('super_admin','admin','librarian')", name='ck_admin_users_role'),
    )
    op.create_index('ix_admin_users_email', 'admin_users', ['email'])

    op.create_table(
        'libraries',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('address', sa.String(500), nullable=False, server_default=''),
        sa.Column('postal_code', sa.String(20), nullable=False, server_default=''),
        sa.Column('city', sa.String(120), nullable=False),
        sa.Column('wilaya', sa.String(120), nullable=False),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('email', sa.String(320), nullable=True),
        sa.Column('floor_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('latitude', sa.Float(), nullable=False, server_default='0'),
        sa.Column('longitude', sa.Float(), nullable=False, server_default='0'),
        sa.Column('logo_url', sa.Text(), nullable=True),
        sa.Column('hours', sa.String(255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_by', sa.String(64), nullable=True),
        _ts('created_at'),
        _ts('updated_at'),
    )
    op.create_index('ix_libraries_wilaya', 'libraries', ['wilaya'])

    op.create_table(
        'floors',
        sa.Column('library_id', sa.String(64), sa.ForeignKey('libraries.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('floor_number', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('map_asset_path', sa.Text(), nullable=True),
        sa.Column('map_url', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('shelf_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('map_width', sa.Float(), nullable=True),
        sa.Column('map_height', sa.Float(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        _ts('created_at'),
        _ts('updated_at'),
    )
    op.create_index('idx_floors_library_number', 'floors', ['library_id', 'floor_number'])

    op.create_table(
        'shelves',
        sa.Column('library_id', sa.String(64), sa.ForeignKey('libraries.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('floor_id', sa.String(64), nullable=False),
        sa.Column('name', sa.String(120), nullable=False),
        sa.Column('x', sa.Float(), nullable=False, server_default='0'),
        sa.Column('y', sa.Float(), nullable=False, server_default='0'),
        sa.Column('z', sa.Float(), nullable=False, server_default='0'),
        sa.Column('width', sa.Float(), nullable=False, server_default='0'),
        sa.Column('height', sa.Float(), nullable=False, server_default='0'),
        sa.Column('depth', sa.Float(), nullable=False, server_default='0'),
        sa.Column('category', sa.String(120), nullable=True),
        sa.Column('capacity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('current_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        _ts('last_correction_date'),
        _ts('last_scan_date'),
        sa.Column('accuracy', sa.Float(), nullable=False, server_default='0'),
        _ts('created_at'),
        _ts('updated_at'),
        sa.ForeignKeyConstraint(
            ['library_id', 'floor_id'], ['floors.library_id', 'floors.id'], ondelete='CASCADE'
        ),
    )
    op.create_index('idx_shelves_library_floor', 'shelves', ['library_id', 'floor_id'])

    op.create_table(
        'books',
        sa.Column('isbn', sa.String(32), primary_key=True),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('author', sa.String(255), nullable=False),
        sa.Column('category', sa.String(120), nullable=False),
        sa.Column('cover_url', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('publisher', sa.String(255), nullable=True),
        sa.Column('publish_date', sa.String(32), nullable=True),
        sa.Column('language', sa.String(8), nullable=False, server_default='fr'),
        sa.Column('page_count', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('added_by', sa.String(64), nullable=True),
        sa.Column('scan_count', sa.Integer(), nullable=False, server_default='0'),
        _ts('last_scanned_at'),
        _ts('created_at'),
        _ts('updated_at'),
    )
    op.create_index('ix_books_category', 'books', ['category'])

    op.create_table(
        'shelf_books',
        sa.Column('library_id', sa.String(64), primary_key=True),
        sa.Column('shelf_id', sa.String(64), primary_key=True),
        sa.Column('book_isbn', sa.String(32), sa.ForeignKey('books.isbn', ondelete='CASCADE'), primary_key=True),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('expected_position', sa.Integer(), nullable=False),
        sa.Column('is_correct_order', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_flagged', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('reason', sa.Text(), nullable=True),
        _ts('last_checked_at'),
        sa.Column('misplacement_count', sa.Integer(), nullable=False, server_default='0'),
        _ts('added_at'),
        _ts('updated_at'),
        sa.ForeignKeyConstraint(
            ['library_id', 'shelf_id'], ['shelves.library_id', 'shelves.id'], ondelete='CASCADE'
        ),
    )

    op.create_table(
        'book_locations',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('book_isbn', sa.String(32), sa.ForeignKey('books.isbn', ondelete='CASCADE'), nullable=False),
        sa.Column('library_id', sa.String(64), sa.ForeignKey('libraries.id', ondelete='CASCADE'), nullable=False),
        sa.Column('floor_id', sa.String(64), nullable=True),
        sa.Column('shelf_id', sa.String(64), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('expected_position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_correct_order', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_flagged', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('reason', sa.Text(), nullable=True),
        _ts('last_checked_at'),
        sa.Column('misplacement_count', sa.Integer(), nullable=False, server_default='0'),
        _ts('created_at'),
        _ts('updated_at'),
    )
    op.create_index(
        'uq_book_locations_isbn_library_shelf', 'book_locations', ['book_isbn', 'library_id', 'shelf_id'], unique=True
    )
    op.create_index('idx_book_locations_library_correct', 'book_locations', ['library_id', 'is_correct_order'])

    op.create_table(
        'scans',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('user_id', sa.String(64), nullable=True),
        sa.Column('library_id', sa.String(64), sa.ForeignKey('libraries.id', ondelete='CASCADE'), nullable=False),
        sa.Column('floor_id', sa.String(64), nullable=False),
        sa.Column('shelf_id', sa.String(64), nullable=False),
        sa.Column('scanned_books', postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column('total_scanned', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('correct_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('error_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('accuracy', sa.Float(), nullable=False, server_default='0'),
        sa.Column('scan_duration', sa.Float(), nullable=True),
        sa.Column('device_info', postgresql.JSONB(), nullable=True),
        _ts('created_at', nullable=False),
    )
    op.create_index('idx_scans_library_created', 'scans', ['library_id', 'created_at'])

    op.create_table(
        'corrections',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('library_id', sa.String(64), sa.ForeignKey('libraries.id', ondelete='CASCADE'), nullable=False),
        sa.Column('shelf_id', sa.String(64), nullable=False),
        sa.Column('user_id', sa.String(64), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='in_progress'),
        sa.Column('total_moves', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('completed_moves', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('progress_percentage', sa.Float(), nullable=False, server_default='0'),
        sa.Column('movements', postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        _ts('started_at', nullable=False),
        _ts('completed_at'),
        sa.Column('duration', sa.Float(), nullable=True),
        _ts('created_at', nullable=False),
        _ts('updated_at'),
        sa.CheckConstraint("status IN ('in_progress','completed','cancelled')", name='ck_corrections_status'),
    )
    op.create_index('idx_corrections_library_created', 'corrections', ['library_id', 'created_at'])

    op.create_table(
        'analytics',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('date', sa.String(10), nullable=False),
        sa.Column('library_id', sa.String(64), nullable=True),
        sa.Column('metrics', postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column('top_misplaced_shelves', postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column('top_scanned_books', postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        _ts('created_at', nullable=False),
    )
    op.create_index('uq_analytics_date_library', 'analytics', ['date', 'library_id'], unique=True)

    op.create_table(
        'system_config',
        sa.Column('id', sa.String(32), primary_key=True),
        sa.Column('app_version', sa.String(32), nullable=False, server_default='1.0.0'),
        sa.Column('min_app_version', sa.String(32), nullable=False, server_default='1.0.0'),
        sa.Column('maintenance_mode', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('maintenance_message', sa.Text(), nullable=True),
        sa.Column('features', postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column('settings', postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        _ts('updated_at'),
        sa.Column('updated_by', sa.String(64), nullable=True),
    )

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('actor_uid', sa.String(64), nullable=True),
        sa.Column('action_type', sa.Text(), nullable=False),
        sa.Column('target_type', sa.Text(), nullable=True),
        sa.Column('target_id', sa.String(128), nullable=True),
        sa.Column('status', sa.Text(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('metadata', postgresql.JSONB(), nullable=True),
        _ts('created_at', nullable=False),
    )
    op.create_index('ix_audit_logs_actor_uid_created_at', 'audit_logs', ['actor_uid', 'created_at'])
    op.create_index('ix_audit_logs_action_type', 'audit_logs', ['action_type'])


def downgrade() -> None:
    for table in (
        'audit_logs',
        'system_config',
        'analytics',
        'corrections',
        'scans',
        'book_locations',
        'shelf_books',
        'books',
        'shelves',
        'floors',
        'libraries',
        'admin_users',
        'auth_sessions',
        'auth_accounts',
    ):
        op.drop_table(table)
