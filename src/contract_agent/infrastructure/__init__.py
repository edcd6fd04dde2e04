"""Infrastructure layer: configuration, LLM access and SQLite persistence."""
