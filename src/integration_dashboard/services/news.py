"""News service backed by the Hacker News APIs."""

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime

from pydantic import BaseModel, Field

from integration_dashboard.domain.news import Story
from integration_dashboard.services.fetcher import CachedFetcher

HACKER_NEWS_URL = "https://hacker-news.firebaseio.com/v0"
ALGOLIA_SEARCH_URL = "https://hn.algolia.com/api/v1/search"
DISCUSSION_URL = "https://news.ycombinator.com/item?id={id}"


class _Item(BaseModel):
    id: int
    title: str | None = None
    url: str | None = None
    by: str | None = None
    score: int | None = None
    descendants: int | None = None
    time: int | None = None


class _Hit(BaseModel):
    object_id: int = Field(alias="objectID")
    title: str | None = None
    url: str | None = None
    author: str | None = None
    points: int | None = None
    num_comments: int | None = None
    created_at: datetime | None = None


class _SearchResults(BaseModel):
    hits: list[_Hit]


@dataclass
class NewsService:
    """Top stories and story search."""

    fetcher: CachedFetcher
    base_url: str = HACKER_NEWS_URL
    search_url: str = ALGOLIA_SEARCH_URL

    async def top_stories(self, limit: int = 10) -> list[Story]:
        """Return the current top stories."""
        ids = await self.fetcher.request_as(
            list[int], f"{self.base_url}/topstories.json"
        )
        # Deleted items come back as null.
        items = await asyncio.gather(
            *(
                self.fetcher.request_as(
                    _Item | None, f"{self.base_url}/item/{story_id}.json"
                )
                for story_id in ids[:limit]
            )
        )
        return [_story_from_item(item) for item in items if item]

    async def search(self, query: str, limit: int = 10) -> list[Story]:
        """Search stories by keyword."""
        if not query.strip():
            return await self.top_stories(limit)
        results = await self.fetcher.request_as(
            _SearchResults,
            self.search_url,
            {"query": query, "tags": "story", "hitsPerPage": limit},
        )
        return [_story_from_hit(hit) for hit in results.hits]


def _story_from_item(item: _Item) -> Story:
    return Story(
        id=item.id,
        title=item.title or "No Title",
        url=item.url or DISCUSSION_URL.format(id=item.id),
        author=item.by,
        score=item.score or 0,
        comments=item.descendants or 0,
        published_at=(
            datetime.fromtimestamp(item.time, tz=UTC) if item.time else None
        ),
    )


def _story_from_hit(hit: _Hit) -> Story:
    return Story(
        id=hit.object_id,
        title=hit.title or "No Title",
        url=hit.url or DISCUSSION_URL.format(id=hit.object_id),
        author=hit.author,
        score=hit.points or 0,
        comments=hit.num_comments or 0,
        published_at=hit.created_at,
    )
