"""
Spotify integration module for spot-linker.

Provides the TrackDescriptor model, the input unit of the YouTube matcher.
Fetching playlists from the Spotify API happens upstream; this module only
turns Spotify track objects into descriptors.

Usage:
    from spot_linker.spotify import TrackDescriptor

    track = TrackDescriptor.from_spotify_api(item["track"])
"""

from spot_linker.spotify.models import TrackDescriptor

__all__ = [
    "TrackDescriptor",
]
