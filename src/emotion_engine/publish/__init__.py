"""Upload pictures and publish detection events."""
