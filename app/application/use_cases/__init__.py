"""Use cases orchestrate domain entities, repositories and storage."""
