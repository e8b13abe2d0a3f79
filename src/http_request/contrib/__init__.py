"""Optional integrations (extra dependencies required)."""
