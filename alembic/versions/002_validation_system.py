"""Connections and the peer validation workflow.

Creates connections, validation_requests, validation_records. Constraint
names are matched by the services when remapping unique violations.

Revision ID: 002_validation_system
Revises: 001_core_schema
Create Date: 2026-10-18
"""

from collections.abc import Sequence

from alembic import op

revision: str = "002_validation_system"
down_revision: str | None = "001_core_schema"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Connections ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS connections (
            id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            from_user UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            to_user UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            status VARCHAR(20) NOT NULL DEFAULT 'connected',
            created_at TIMESTAMPTZ DEFAULT NOW(),
            updated_at TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT unique_connection UNIQUE (from_user, to_user),
            CONSTRAINT no_self_connection CHECK (from_user != to_user),
            CONSTRAINT connections_status_check CHECK (status IN ('connected', 'pending', 'blocked'))
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_connections_from_user ON connections(from_user)")
    op.execute("CREATE INDEX IF NOT EXISTS idx_connections_to_user ON connections(to_user)")

    # --- Validation requests ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS validation_requests (
            id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            from_user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            to_user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            category VARCHAR(50) NOT NULL,
            specific_item TEXT NOT NULL,
            status VARCHAR(20) NOT NULL DEFAULT 'pending',
            expires_at TIMESTAMPTZ NOT NULL DEFAULT (NOW() + INTERVAL '7 days'),
            created_at TIMESTAMPTZ DEFAULT NOW(),
            updated_at TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT unique_validation_request UNIQUE (from_user_id, to_user_id, category, specific_item),
            CONSTRAINT no_self_validation CHECK (from_user_id != to_user_id),
            CONSTRAINT validation_requests_category_check
                CHECK (category IN ('skills', 'education', 'experience')),
            CONSTRAINT validation_requests_status_check
                CHECK (status IN ('pending', 'approved', 'declined', 'expired'))
        )
    """)
    op.execute(
        "CREATE INDEX IF NOT EXISTS idx_validation_requests_from_user ON validation_requests(from_user_id)"
    )
    op.execute(
        "CREATE INDEX IF NOT EXISTS idx_validation_requests_pending "
        "ON validation_requests(to_user_id, status, expires_at)"
    )

    # --- Validation records (append-only) ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS validation_records (
            id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            validated_user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            validator_user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            category VARCHAR(50) NOT NULL,
            specific_item TEXT NOT NULL,
            validation_request_id UUID REFERENCES validation_requests(id) ON DELETE SET NULL,
            created_at TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT unique_validation_record
                UNIQUE (validated_user_id, validator_user_id, category, specific_item),
            CONSTRAINT no_self_validation_record CHECK (validated_user_id != validator_user_id),
            CONSTRAINT validation_records_category_check
                CHECK (category IN ('skills', 'education', 'experience'))
        )
    """)
    op.execute(
        "CREATE INDEX IF NOT EXISTS idx_validation_records_validated_user "
        "ON validation_records(validated_user_id)"
    )
    op.execute(
        "CREATE INDEX IF NOT EXISTS idx_validation_records_validator_user "
        "ON validation_records(validator_user_id)"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS validation_records CASCADE")
    op.execute("DROP TABLE IF EXISTS validation_requests CASCADE")
    op.execute("DROP TABLE IF EXISTS connections CASCADE")
