"""
Inventory persistence layer using SQLAlchemy models and alembic migrations
"""
