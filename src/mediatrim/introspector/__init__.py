"""Host adapters: where trim inputs come from.

- FFprobeIntrospector: probes a file and selects default tracks
- load_host_snapshot: reads a media player's property snapshot
"""

from .ffprobe import FFprobeIntrospector, load_host_snapshot, probe_host_state
from .interface import HostStateError, MediaIntrospectionError
from .parsers import parse_ffprobe_output, parse_host_snapshot

__all__ = [
    "FFprobeIntrospector",
    "HostStateError",
    "MediaIntrospectionError",
    "load_host_snapshot",
    "parse_ffprobe_output",
    "parse_host_snapshot",
    "probe_host_state",
]
