"""Storage backends: local SQLite via SQLModel and hosted Supabase."""
