"""Snippet search: a linear, case-insensitive substring filter."""

from devmind.store.models import Snippet


def matches(snippet: Snippet, needle: str, search_code: bool = True) -> bool:
    """Check one snippet against an already lower-cased query."""
    if needle in snippet.title.lower():
        return True
    if search_code and needle in snippet.code.lower():
        return True
    return any(needle in tag.lower() for tag in snippet.tags)


def filter_snippets(snippets: list[Snippet], query: str, search_code: bool = True) -> list[Snippet]:
    """
    Return the snippets matching query, in their original order.

    A snippet matches when the query is found in its title, its code
    (only if search_code) or any of its tags, ignoring case. An empty
    query matches everything.
    """
    if not query:
        return list(snippets)
    needle = query.lower()
    return [s for s in snippets if matches(s, needle, search_code)]
