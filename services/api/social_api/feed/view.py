"""
Tabbed timeline state for the home page.

A FeedView holds the request's view of the timeline:

  user          — current profile (None when signed out), passed in
                  explicitly by whoever owns the auth context
  auth_loading  — True until the auth provider has finished initialising
  tab           — "for-you" | "following"
  posts         — at most `page_size` posts, newest first
  loading       — True while a refresh is in flight

refresh() is re-run whenever the tab changes, the user changes, auth
finishes initialising, or a post was created. Overlapping refreshes are not
coordinated: whichever resolves last wins.

Following tab policy: when the user follows nobody the post query is left
unrestricted, so the tab shows the global feed instead of an empty page.
"""
import logging
import time
from typing import Callable, Optional

from opentelemetry import trace

from social_api.config import settings
from social_api.schemas import FeedPage, FeedPost, FeedTab, TabState
from social_api.telemetry import FEED_ERRORS_TOTAL, FEED_LATENCY, FEED_POSTS_RETURNED

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

EMPTY_MESSAGES = {
    FeedTab.FOR_YOU: "No posts yet. Be the first to share!",
    FeedTab.FOLLOWING: "Follow entrepreneurs to see their posts here!",
}

TAB_LABELS = {
    FeedTab.FOR_YOU: "For You",
    FeedTab.FOLLOWING: "Following",
}


class FeedView:
    def __init__(
        self,
        source,
        user=None,
        tab: FeedTab = FeedTab.FOR_YOU,
        auth_loading: bool = True,
        page_size: Optional[int] = None,
        placeholder_count: Optional[int] = None,
    ) -> None:
        """
        `source` is the feed query interface (see FeedRepository): it must
        provide `following_ids(user_id)` and `recent_posts(limit, author_ids)`.
        `user` is anything with an `id` attribute.
        """
        self.source = source
        self.user = user
        self.tab = FeedTab(tab)
        self.auth_loading = auth_loading
        self.page_size = page_size or settings.feed_page_size
        self.placeholder_count = placeholder_count or settings.feed_placeholder_count
        self.posts: list[FeedPost] = []
        self.loading = True
        self._listeners: list[Callable[[str, object], None]] = []

    # ── observers ──────────────────────────────────────────────────────────

    def subscribe(self, listener: Callable[[str, object], None]) -> None:
        """Register `listener(field, value)`, called on every state change."""
        self._listeners.append(listener)

    def _set(self, field: str, value) -> None:
        setattr(self, field, value)
        for listener in self._listeners:
            listener(field, value)

    # ── triggers ───────────────────────────────────────────────────────────

    async def finish_auth(self, user=None) -> None:
        """The auth provider is ready; `user` is the signed-in profile or None."""
        self.user = user
        self.auth_loading = False
        await self.refresh()

    async def set_user(self, user) -> None:
        self.user = user
        if not self.auth_loading:
            await self.refresh()

    async def select_tab(self, tab) -> None:
        self.tab = FeedTab(tab)
        if not self.auth_loading:
            await self.refresh()

    async def post_created(self) -> None:
        await self.refresh()

    # ── data ───────────────────────────────────────────────────────────────

    async def refresh(self) -> list[FeedPost]:
        self._set("loading", True)
        start = time.perf_counter()
        with tracer.start_as_current_span("feed_refresh") as span:
            span.set_attribute("feed.tab", self.tab.value)
            try:
                author_ids = None
                if self.tab == FeedTab.FOLLOWING and self.user is not None:
                    span.set_attribute("user.id", self.user.id)
                    following = await self.source.following_ids(self.user.id)
                    # Empty follow set: leave the query unrestricted
                    if following:
                        author_ids = following
                    span.set_attribute("feed.following_count", len(following))

                posts = await self.source.recent_posts(
                    limit=self.page_size, author_ids=author_ids
                )
                self._set("posts", list(posts)[: self.page_size])
            except Exception:
                logger.exception("Error fetching posts (tab=%s)", self.tab.value)
                FEED_ERRORS_TOTAL.inc()
                self._set("posts", [])
            finally:
                self._set("loading", False)

            FEED_LATENCY.observe(time.perf_counter() - start)
            FEED_POSTS_RETURNED.observe(len(self.posts))
            span.set_attribute("feed.posts_returned", len(self.posts))
        return self.posts

    # ── rendering ──────────────────────────────────────────────────────────

    def render(self) -> FeedPage:
        signed_in = self.user is not None
        tabs = [
            TabState(
                value=tab,
                label=TAB_LABELS[tab],
                # Following is disabled, not hidden, when signed out
                enabled=signed_in or tab == FeedTab.FOR_YOU,
                active=tab == self.tab,
            )
            for tab in FeedTab
        ]
        page = FeedPage(tab=self.tab, tabs=tabs)
        if self.auth_loading:
            page.auth_pending = True
            return page

        page.can_post = signed_in
        if self.loading:
            page.loading = True
            page.placeholders = self.placeholder_count
        elif self.posts:
            page.posts = list(self.posts)
        else:
            page.empty_message = EMPTY_MESSAGES[self.tab]
        return page
