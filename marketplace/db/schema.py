"""
Relational schema. Plain DDL kept portable between PostgreSQL and SQLite:
string ids, list columns stored as JSON text.
"""

SCHEMA_STATEMENTS = [
    """
    CREATE TABLE IF NOT EXISTS users (
        id VARCHAR(32) PRIMARY KEY,
        email VARCHAR(255) NOT NULL UNIQUE,
        name VARCHAR(200),
        password_hash VARCHAR(255) NOT NULL,
        role VARCHAR(20) NOT NULL,
        is_active BOOLEAN NOT NULL DEFAULT TRUE,
        created_at TIMESTAMP NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS client_profiles (
        id VARCHAR(32) PRIMARY KEY,
        user_id VARCHAR(32) NOT NULL UNIQUE REFERENCES users(id) ON DELETE CASCADE,
        first_name VARCHAR(100),
        last_name VARCHAR(100),
        company_name VARCHAR(200),
        created_at TIMESTAMP NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS talent_profiles (
        id VARCHAR(32) PRIMARY KEY,
        user_id VARCHAR(32) NOT NULL UNIQUE REFERENCES users(id) ON DELETE CASCADE,
        first_name VARCHAR(100),
        last_name VARCHAR(100),
        title VARCHAR(200),
        bio TEXT,
        skills TEXT NOT NULL DEFAULT '[]',
        experience VARCHAR(50),
        hourly_rate DOUBLE PRECISION,
        portfolio TEXT,
        portfolio_url VARCHAR(500),
        portfolio_projects TEXT,
        certifications TEXT NOT NULL DEFAULT '[]',
        tier VARCHAR(10) NOT NULL DEFAULT 'bronze',
        active_picks INTEGER NOT NULL DEFAULT 0,
        completed_projects INTEGER NOT NULL DEFAULT 0,
        success_rate DOUBLE PRECISION NOT NULL DEFAULT 0,
        total_earnings DOUBLE PRECISION NOT NULL DEFAULT 0,
        verification_status VARCHAR(20) NOT NULL DEFAULT 'pending',
        platform_access BOOLEAN NOT NULL DEFAULT FALSE,
        created_at TIMESTAMP NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS agency_profiles (
        id VARCHAR(32) PRIMARY KEY,
        user_id VARCHAR(32) NOT NULL UNIQUE REFERENCES users(id) ON DELETE CASCADE,
        first_name VARCHAR(100),
        last_name VARCHAR(100),
        agency_name VARCHAR(200),
        description TEXT,
        company_size VARCHAR(50),
        industry VARCHAR(100),
        website VARCHAR(500),
        location VARCHAR(200),
        founded_year INTEGER,
        created_at TIMESTAMP NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS trainer_profiles (
        id VARCHAR(32) PRIMARY KEY,
        user_id VARCHAR(32) NOT NULL UNIQUE REFERENCES users(id) ON DELETE CASCADE,
        first_name VARCHAR(100),
        last_name VARCHAR(100),
        title VARCHAR(200),
        specialization VARCHAR(200),
        bio TEXT,
        skills TEXT NOT NULL DEFAULT '[]',
        experience VARCHAR(100),
        certifications TEXT NOT NULL DEFAULT '[]',
        hourly_rate VARCHAR(50),
        website VARCHAR(500),
        location VARCHAR(200),
        created_at TIMESTAMP NOT NULL,
        updated_at TIMESTAMP NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS projects (
        id VARCHAR(32) PRIMARY KEY,
        client_id VARCHAR(32) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        title VARCHAR(200) NOT NULL,
        description TEXT NOT NULL,
        budget DOUBLE PRECISION NOT NULL,
        deadline TIMESTAMP NOT NULL,
        category VARCHAR(100) NOT NULL,
        skills TEXT NOT NULL DEFAULT '[]',
        project_type VARCHAR(20) NOT NULL DEFAULT 'fixed',
        status VARCHAR(20) NOT NULL DEFAULT 'open',
        minimum_tier VARCHAR(10) NOT NULL DEFAULT 'bronze',
        created_at TIMESTAMP NOT NULL,
        updated_at TIMESTAMP NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS applications (
        id VARCHAR(32) PRIMARY KEY,
        project_id VARCHAR(32) NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
        talent_id VARCHAR(32) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        cover_letter TEXT,
        proposed_rate DOUBLE PRECISION,
        status VARCHAR(20) NOT NULL DEFAULT 'pending',
        is_picked BOOLEAN NOT NULL DEFAULT FALSE,
        picked_at TIMESTAMP,
        created_at TIMESTAMP NOT NULL,
        updated_at TIMESTAMP NOT NULL,
        UNIQUE (project_id, talent_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS conversations (
        id VARCHAR(32) PRIMARY KEY,
        client_id VARCHAR(32) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        talent_id VARCHAR(32) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        project_id VARCHAR(32) REFERENCES projects(id) ON DELETE SET NULL,
        archived_by_client BOOLEAN NOT NULL DEFAULT FALSE,
        archived_by_talent BOOLEAN NOT NULL DEFAULT FALSE,
        deleted_by_client BOOLEAN NOT NULL DEFAULT FALSE,
        deleted_by_talent BOOLEAN NOT NULL DEFAULT FALSE,
        created_at TIMESTAMP NOT NULL,
        updated_at TIMESTAMP NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS messages (
        id VARCHAR(32) PRIMARY KEY,
        conversation_id VARCHAR(32) NOT NULL REFERENCES conversations(id) ON DELETE CASCADE,
        sender_id VARCHAR(32) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        content TEXT NOT NULL,
        is_read BOOLEAN NOT NULL DEFAULT FALSE,
        created_at TIMESTAMP NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS notifications (
        id VARCHAR(32) PRIMARY KEY,
        user_id VARCHAR(32) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        type VARCHAR(50) NOT NULL,
        title VARCHAR(200) NOT NULL,
        message TEXT NOT NULL,
        is_read BOOLEAN NOT NULL DEFAULT FALSE,
        related_project_id VARCHAR(32),
        related_application_id VARCHAR(32),
        created_at TIMESTAMP NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS talent_verifications (
        id VARCHAR(32) PRIMARY KEY,
        talent_profile_id VARCHAR(32) NOT NULL UNIQUE REFERENCES talent_profiles(id) ON DELETE CASCADE,
        github_username VARCHAR(100),
        gitlab_username VARCHAR(100),
        code_repository_url VARCHAR(500),
        linkedin_url VARCHAR(500),
        portfolio_reviewed BOOLEAN NOT NULL DEFAULT FALSE,
        portfolio_score DOUBLE PRECISION,
        portfolio_notes TEXT,
        code_sample_reviewed BOOLEAN NOT NULL DEFAULT FALSE,
        code_sample_score DOUBLE PRECISION,
        code_sample_notes TEXT,
        skill_tests_taken TEXT NOT NULL DEFAULT '[]',
        skill_tests_score DOUBLE PRECISION,
        linkedin_verified BOOLEAN NOT NULL DEFAULT FALSE,
        identity_verified BOOLEAN NOT NULL DEFAULT FALSE,
        overall_score DOUBLE PRECISION,
        verification_decision VARCHAR(20) NOT NULL DEFAULT 'pending',
        rejection_reason TEXT,
        reviewed_by VARCHAR(32),
        reviewed_at TIMESTAMP,
        created_at TIMESTAMP NOT NULL,
        updated_at TIMESTAMP NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS milestones (
        id VARCHAR(32) PRIMARY KEY,
        project_id VARCHAR(32) NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
        title VARCHAR(200) NOT NULL,
        description TEXT,
        amount DOUBLE PRECISION NOT NULL,
        start_date TIMESTAMP NOT NULL,
        end_date TIMESTAMP NOT NULL,
        status VARCHAR(20) NOT NULL DEFAULT 'pending',
        completed_at TIMESTAMP,
        created_by VARCHAR(32) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        created_at TIMESTAMP NOT NULL,
        updated_at TIMESTAMP NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS tasks (
        id VARCHAR(32) PRIMARY KEY,
        project_id VARCHAR(32) NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
        title VARCHAR(200) NOT NULL,
        description TEXT,
        status VARCHAR(20) NOT NULL DEFAULT 'todo',
        priority VARCHAR(20) NOT NULL DEFAULT 'medium',
        due_date TIMESTAMP,
        assignee_id VARCHAR(32) REFERENCES users(id) ON DELETE SET NULL,
        created_by VARCHAR(32) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        created_at TIMESTAMP NOT NULL,
        updated_at TIMESTAMP NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS waitlist (
        id VARCHAR(32) PRIMARY KEY,
        email VARCHAR(255) NOT NULL UNIQUE,
        created_at TIMESTAMP NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS ix_projects_client ON projects (client_id)",
    "CREATE INDEX IF NOT EXISTS ix_milestones_project ON milestones (project_id)",
    "CREATE INDEX IF NOT EXISTS ix_tasks_project ON tasks (project_id)",
    "CREATE INDEX IF NOT EXISTS ix_applications_talent ON applications (talent_id)",
    "CREATE INDEX IF NOT EXISTS ix_messages_conversation ON messages (conversation_id)",
    "CREATE INDEX IF NOT EXISTS ix_notifications_user ON notifications (user_id)",
]

# Children first so foreign keys never block a drop
DROP_ORDER = [
    "waitlist",
    "tasks",
    "milestones",
    "talent_verifications",
    "notifications",
    "messages",
    "conversations",
    "applications",
    "projects",
    "trainer_profiles",
    "agency_profiles",
    "talent_profiles",
    "client_profiles",
    "users",
]
