"""Infrastructure layer - configuration, database and logging wiring."""
