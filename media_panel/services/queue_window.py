"""Rotated view of the play queue anchored at the currently playing track.

The device reports the absolute index of the playing track; the panel always
shows that track first, followed by the rest of the queue in order and then
wrapping around to the start. Each row remembers its absolute index so jump
and remove commands address the right queue entry.
"""

from collections import OrderedDict
from collections.abc import Sequence

from media_panel.exceptions import QueueChangedException, QueuePositionException, StaleIndexError
from media_panel.logging_config import get_logger, log_with_context
from media_panel.models.device import TrackInfo
from media_panel.models.panel import QueueRow

logger = get_logger(__name__)

HISTORY_SIZE = 16


def _check_anchor(anchor_index: int, queue_size: int) -> int:
    if not 0 <= anchor_index < queue_size:
        raise StaleIndexError(anchor_index, queue_size)
    return anchor_index


def render_queue_window(queue: Sequence[TrackInfo], anchor_index: int) -> list[QueueRow]:
    """Rotate ``queue`` so that ``anchor_index`` comes first.

    Args:
        queue: Full device queue in playback order
        anchor_index: 0-based index of the playing track

    Returns:
        Rows ``queue[anchor:] + queue[:anchor]`` numbered from 1. An empty
        queue gives no rows; an anchor outside the queue (stale after a
        removal) is treated as 0.
    """
    if not queue:
        return []

    try:
        anchor = _check_anchor(anchor_index, len(queue))
    except StaleIndexError as e:
        log_with_context(
            logger,
            "debug",
            "Stale queue anchor, showing queue from the start",
            error=e.message,
            event_type="queue_stale_anchor",
        )
        anchor = 0

    order = list(range(anchor, len(queue))) + list(range(anchor))
    return [
        QueueRow(display_position=rank + 1, absolute_index=index, track=queue[index])
        for rank, index in enumerate(order)
    ]


class QueueWindow:
    """Keeps recent queue renders for resolving user commands.

    Every render that differs from the previous one gets a new generation
    number. The queue fragment embeds the generation it was drawn from, so a
    click is resolved against the rows the user actually saw even if a poll
    has rotated the window since.
    """

    def __init__(self, history_size: int = HISTORY_SIZE):
        self._rows: list[QueueRow] = []
        self._generation = 0
        self._history: OrderedDict[int, list[QueueRow]] = OrderedDict()
        self._history_size = history_size

    @property
    def rows(self) -> list[QueueRow]:
        return list(self._rows)

    @property
    def generation(self) -> int:
        """Generation of the current mapping (0 before the first render)."""
        return self._generation

    def update(self, queue: Sequence[TrackInfo], anchor_index: int) -> list[QueueRow]:
        """Render the window and remember it as the current mapping."""
        rows = render_queue_window(queue, anchor_index)
        if rows != self._rows or not self._history:
            self._generation += 1
            self._history[self._generation] = rows
            while len(self._history) > self._history_size:
                self._history.popitem(last=False)
        self._rows = rows
        return self.rows

    def row_at(self, display_position: int, generation: int | None = None) -> QueueRow:
        """Row shown at ``display_position`` in the given render (current one if None).

        Raises:
            QueueChangedException: If that render is too old to be remembered
            QueuePositionException: If the position is not in that render
        """
        if generation is None:
            rows = self._rows
        elif generation in self._history:
            rows = self._history[generation]
        else:
            raise QueueChangedException(display_position, generation)

        if not 1 <= display_position <= len(rows):
            raise QueuePositionException(display_position, len(rows))
        return rows[display_position - 1]

    def resolve(self, display_position: int, generation: int | None = None) -> int:
        """Map a display position from a render to its absolute 0-based index."""
        return self.row_at(display_position, generation).absolute_index
