"""Infrastructure: application context, factories and the event bus."""
