"""Supabase repositories for scheduled records and their owners."""

from __future__ import annotations

from .containers import ContainerRepository
from .entries import EntryRepository
from .profiles import ProfileRepository
from .shares import ShareRepository

__all__ = ["ContainerRepository", "EntryRepository", "ProfileRepository", "ShareRepository"]
