"""clipchain - join video clips with transitions via FFmpeg."""

__version__ = "0.3.0"
