"""mediatrim - Extract time ranges of media files with ffmpeg."""

__version__ = "0.1.0"
