"""Full-text search across Redmine resources, one page or all pages."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from redmine_cli.redmine.client import RedmineClient
from redmine_cli.redmine.models import SearchPage, SearchResult

logger = logging.getLogger("redmine_cli")

DEFAULT_SEARCH_PAGE_SIZE = 100
SCOPES = ("all", "my_projects", "subprojects")

# option attribute -> query parameter
_RESOURCE_PARAMS = {
    "issues": "issues",
    "news": "news",
    "documents": "documents",
    "changesets": "changesets",
    "wiki_pages": "wiki_pages",
    "messages": "messages",
    "projects": "projects",
}


@dataclass
class SearchOptions:
    query: str
    offset: int = 0
    limit: int = DEFAULT_SEARCH_PAGE_SIZE
    scope: str | None = None
    all_words: bool = False
    titles_only: bool = False
    issues: bool = True
    news: bool = False
    documents: bool = False
    changesets: bool = False
    wiki_pages: bool = False
    messages: bool = False
    projects: bool = False

    def include_all_types(self) -> SearchOptions:
        return replace(self, **{attr: True for attr in _RESOURCE_PARAMS})

    def to_params(self) -> dict[str, str]:
        params = {"q": self.query}
        if self.offset > 0:
            params["offset"] = str(self.offset)
        if self.limit > 0:
            params["limit"] = str(self.limit)
        if self.scope:
            params["scope"] = self.scope
        for attr, name in _RESOURCE_PARAMS.items():
            if getattr(self, attr):
                params[name] = "1"
        if self.all_words:
            params["all_words"] = "1"
        if self.titles_only:
            params["titles_only"] = "1"
        return params


def search(client: RedmineClient, options: SearchOptions) -> SearchPage:
    """Fetch a single page of results plus the reported total."""
    return client.search(options.to_params())


def search_all(client: RedmineClient, options: SearchOptions) -> list[SearchResult]:
    """Follow pages until one comes back empty or the reported total is reached.

    The empty-page check always ends the loop, so a wrong ``total_count``
    from the service cannot make it run forever.
    """
    page_size = options.limit if options.limit > 0 else DEFAULT_SEARCH_PAGE_SIZE
    offset = max(options.offset, 0)
    results: list[SearchResult] = []
    while True:
        page = search(client, replace(options, offset=offset, limit=page_size))
        if not page.results:
            break
        results.extend(page.results)
        logger.debug(
            "Search page at offset %d returned %d results (total %d)",
            offset, len(page.results), page.total_count,
        )
        if offset + len(page.results) >= page.total_count:
            break
        offset += page_size
    return results
