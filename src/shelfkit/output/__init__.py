"""Output layer — Rich rendering for user-visible catalog messages."""
