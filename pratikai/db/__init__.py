"""Database layer: models, session management and the chat store."""
