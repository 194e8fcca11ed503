"""Snippet store: models, JSON-file persistence and search."""

from devmind.store.models import DEFAULT_LANGUAGE, LANGUAGES, Snippet, migrate_record, parse_tags
from devmind.store.repository import SnippetStore
from devmind.store.search import filter_snippets

__all__ = [
    "DEFAULT_LANGUAGE",
    "LANGUAGES",
    "Snippet",
    "SnippetStore",
    "filter_snippets",
    "migrate_record",
    "parse_tags",
]
