def discard(message, category="message"):
    """Notifier used when no toast sink is attached (background work, tests)."""
