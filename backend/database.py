"""
Database Configuration Module

This module handles the database configuration and connection setup for the ledger backend.
It uses SQLAlchemy for ORM (Object-Relational Mapping) with PostgreSQL as the database.

The module includes:
- Database connection setup
- Session management
- Base model class definition
- Soft delete filter implementation
"""

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session, with_loader_criteria, declarative_base

from config import DATABASE_URL

# Create SQLAlchemy engine
# The engine is the entry point to the SQLAlchemy ORM
engine = create_engine(DATABASE_URL)

# Create SessionLocal class
# autocommit=False means we need to explicitly commit transactions
# autoflush=False means we need to explicitly flush changes to the database
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base is the declarative base class that our ORM models will inherit from
Base = declarative_base()

@event.listens_for(Session, "do_orm_execute")
def add_soft_delete_filter(execute_state):
    """
    Event listener that automatically filters out "soft-deleted" records.

    Adds a filter to all SELECT queries to exclude records where the
    'deleted_at' field is not NULL. Only payments are soft-deleted in this
    service; everything else is either immutable or updated in place.
    Attribute refreshes of rows already in the session are not filtered, and
    a query run with execution_options(include_deleted=True) sees every row.

    Args:
        execute_state: The current execution state of the query
    """
    if (
        execute_state.is_select
        and not execute_state.is_relationship_load
        and not execute_state.is_column_load
        and not execute_state.execution_options.get("include_deleted", False)
    ):
        for entity in execute_state.statement.column_descriptions:
            if hasattr(entity['type'], 'deleted_at'):
                execute_state.statement = execute_state.statement.options(
                    with_loader_criteria(
                        entity['type'],
                        lambda cls: cls.deleted_at.is_(None),
                        include_aliases=True
                    )
                )

# Dependency to get database session
def get_db():
    """
    Dependency function that provides a database session.

    Creates a new database session for each request and ensures that the
    session is properly closed after the request is completed.

    Yields:
        Session: A SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
