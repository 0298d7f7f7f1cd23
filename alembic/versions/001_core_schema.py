"""Core schema: users, profile items, locations, pings, presence.

Creates the uuid-ossp, cube and earthdistance extensions used for id
generation and great-circle proximity search.

Revision ID: 001_core_schema
Revises: None
Create Date: 2026-10-18
"""

from collections.abc import Sequence

from alembic import op

revision: str = "001_core_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')
    op.execute("CREATE EXTENSION IF NOT EXISTS cube")
    op.execute("CREATE EXTENSION IF NOT EXISTS earthdistance")

    # --- Users ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            email VARCHAR(255) NOT NULL,
            name VARCHAR(255),
            created_at TIMESTAMPTZ DEFAULT NOW(),
            updated_at TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT users_email_key UNIQUE (email)
        )
    """)

    # --- Profile items (profile_image rows hold the avatar) ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS profile_items (
            id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            item_type VARCHAR(50) NOT NULL,
            item_data JSONB NOT NULL,
            created_at TIMESTAMPTZ DEFAULT NOW(),
            updated_at TIMESTAMPTZ DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_profile_items_user_id ON profile_items(user_id)")
    op.execute("CREATE INDEX IF NOT EXISTS idx_profile_items_type ON profile_items(user_id, item_type)")

    # --- Mood badges ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS mood_badges (
            id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            mood VARCHAR(50) NOT NULL,
            category VARCHAR(50) NOT NULL,
            value TEXT NOT NULL,
            created_at TIMESTAMPTZ DEFAULT NOW(),
            updated_at TIMESTAMPTZ DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_mood_badges_user_id ON mood_badges(user_id)")

    # --- Locations: one row per user ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS locations (
            id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            latitude DOUBLE PRECISION NOT NULL,
            longitude DOUBLE PRECISION NOT NULL,
            created_at TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT unique_user_location UNIQUE (user_id),
            CONSTRAINT valid_latitude CHECK (latitude BETWEEN -90 AND 90),
            CONSTRAINT valid_longitude CHECK (longitude BETWEEN -180 AND 180)
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_locations_created_at ON locations(created_at)")
    op.execute("CREATE INDEX IF NOT EXISTS idx_locations_position ON locations(latitude, longitude)")

    # --- Pings ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS pings (
            id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            message TEXT NOT NULL,
            mood TEXT NOT NULL,
            latitude DOUBLE PRECISION NOT NULL,
            longitude DOUBLE PRECISION NOT NULL,
            category TEXT,
            value TEXT,
            created_at TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT pings_category_check CHECK (category IN ('skill', 'education', 'experience'))
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_pings_user_id ON pings(user_id)")
    op.execute("CREATE INDEX IF NOT EXISTS idx_pings_created_at ON pings(created_at)")
    op.execute("CREATE INDEX IF NOT EXISTS idx_pings_position ON pings(latitude, longitude)")

    # --- Presence ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS user_status (
            user_id UUID PRIMARY KEY REFERENCES users(id) ON DELETE CASCADE,
            is_broadcasting BOOLEAN NOT NULL DEFAULT false,
            last_seen TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute(
        "CREATE INDEX IF NOT EXISTS idx_user_status_broadcasting ON user_status(is_broadcasting, last_seen)"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS user_status CASCADE")
    op.execute("DROP TABLE IF EXISTS pings CASCADE")
    op.execute("DROP TABLE IF EXISTS locations CASCADE")
    op.execute("DROP TABLE IF EXISTS mood_badges CASCADE")
    op.execute("DROP TABLE IF EXISTS profile_items CASCADE")
    op.execute("DROP TABLE IF EXISTS users CASCADE")
