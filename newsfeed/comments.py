"""Reader comments persisted per article in the shared key-value store."""

import json
import logging
import time
from datetime import datetime
from typing import Callable, List

from pydantic import TypeAdapter, ValidationError

from newsfeed.cache.store import KeyValueStore
from newsfeed.models.schemas import Comment

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "puntope_comments"

_comment_list = TypeAdapter(List[Comment])


class CommentStore:
    """Newest-first comment lists keyed by "<prefix>_<article id>"."""

    def __init__(
        self,
        store: KeyValueStore,
        prefix: str = DEFAULT_PREFIX,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.prefix = prefix
        self._clock = clock

    def key(self, article_id: str) -> str:
        return f"{self.prefix}_{article_id}"

    def list(self, article_id: str) -> List[Comment]:
        raw = self.store.get(self.key(article_id))
        if raw is None:
            return []
        try:
            return _comment_list.validate_python(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Error loading comments for {article_id}: {e}")
            return []

    def add(self, article_id: str, user_name: str, text: str) -> Comment:
        """
        Prepend a comment to an article's list.

        Raises:
            ValueError: If the name or text is blank.
            StorageError: If the store rejects the write.
        """
        user_name, text = (user_name or "").strip(), (text or "").strip()
        if not user_name or not text:
            raise ValueError("Comment requires a user name and text")

        now = self._clock()
        comment = Comment(
            id=str(int(now * 1000)),
            user_name=user_name,
            text=text,
            timestamp=datetime.fromtimestamp(now).strftime("%d/%m/%y %H:%M"),
        )
        comments = [comment] + self.list(article_id)
        self.store.put(
            self.key(article_id),
            _comment_list.dump_json(comments, by_alias=True).decode("utf-8"),
        )
        return comment
