"""Per-instance container for all client state stores."""

import asyncio
from dataclasses import dataclass

from sermon_studio.services.bible import BibleStore
from sermon_studio.services.commentaries import CommentaryStore
from sermon_studio.services.notes import NotesStore
from sermon_studio.services.notifications import ToastFeed
from sermon_studio.services.sermons import SermonStore


@dataclass
class Workspace:
    """Holds every store for one signed-in application instance."""

    notes: NotesStore
    bible: BibleStore
    commentaries: CommentaryStore
    sermons: SermonStore
    toasts: ToastFeed

    async def initialize(self) -> None:
        """Load the user-wide collections concurrently."""
        await asyncio.gather(
            self.notes.load_notes(),
            self.commentaries.load_commentaries(),
            self.sermons.load_user_sermons(),
        )

    def dispose(self) -> None:
        """Drop all cached state; late results of in-flight calls are ignored."""
        self.notes.store.dispose()
        self.bible.dispose()
        self.commentaries.store.dispose()
        self.sermons.store.dispose()
