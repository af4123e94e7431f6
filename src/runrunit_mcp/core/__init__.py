"""Core building blocks: HTTP client, response shaping, errors and logging."""
