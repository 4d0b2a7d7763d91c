# ruff: noqa: N999
"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting exceptions, constrained types and messages
- music/: Media items, collections and session value objects
- matching/: Cross-catalog scoring and query building
"""

from zyra_music.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
