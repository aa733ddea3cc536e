from social_api.feed.repository import FeedRepository, to_feed_post
from social_api.feed.view import EMPTY_MESSAGES, FeedView

__all__ = ["EMPTY_MESSAGES", "FeedRepository", "FeedView", "to_feed_post"]
