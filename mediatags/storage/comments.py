"""Comment editing for media files."""

from __future__ import annotations

import logging

from mediatags.core.models import MediaFile
from mediatags.storage.events import EventBus, EventPublisher, EventType

logger = logging.getLogger(__name__)


class CommentStore(EventPublisher):
    """Applies comment edits to files and forwards them for persistence.

    Edits arrive on every change of the comment field. The file is updated
    immediately; the published event is not awaited and a failing
    subscriber leaves the in-memory comment as edited.
    """

    def __init__(self, event_bus: EventBus | None = None):
        super().__init__(event_bus)

    def set_comment(self, file: MediaFile, comment: str) -> str:
        """Set the comment of a file.

        Args:
            file: File to update
            comment: New comment text

        Returns:
            The applied comment
        """
        file.set_comment(comment)
        logger.debug("Comment of %s set (%d chars)", file.id, len(comment))
        self._publish_event(
            EventType.COMMENT_UPDATED, file_id=file.id, comment=comment
        )
        return comment
