"""Track selection.

Reduces the host's track list to at most one active track per media type.
"""

from __future__ import annotations

from collections.abc import Iterable

from mediatrim.domain import TrackInfo, TrackType


def select_tracks(tracks: Iterable[TrackInfo]) -> dict[TrackType, TrackInfo]:
    """Pick the selected track of each type.

    When the host marks several tracks of one type as selected, the last one
    in host order wins. Unselected tracks are ignored; a missing key means no
    track of that type is available.
    """
    selected: dict[TrackType, TrackInfo] = {}
    for track in tracks:
        if track.selected:
            selected[track.track_type] = track
    return selected
