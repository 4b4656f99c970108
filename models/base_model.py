#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixin for the user API.

- Integer autoincrement primary key (ranking ties are broken by insertion
  order, which this key preserves)
- created_at / updated_at timestamps with server-side defaults
"""

from __future__ import annotations

from sqlalchemy import Column, Integer, DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

# Declarative base for all models
Base = declarative_base()


class BaseModel:
    """
    Base mixin for all persistent models.
    """

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __init__(self, *args, **kwargs):
        """
        Allow attribute initialization via kwargs without requiring a session here.
        Timestamps and the id are filled in by the database on insert.
        """
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)
