"""Infrastructure adapters: PostgreSQL persistence and system services."""
