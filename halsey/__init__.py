"""Mirror HLS playlists and their media onto local storage."""

__version__ = "0.1.0"
