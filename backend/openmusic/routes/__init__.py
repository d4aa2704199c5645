"""
OpenMusic API — Routes Package
===============================

What:  HTTP handlers, one module per resource.
How:   Each module defines thin handler functions and a static `routes` table
       that openmusic.core.routing.register_routes() mounts onto its router.

Route Inventory:
    - albums.py:          /albums, /albums/{id}, /albums/{id}/covers
    - songs.py:           /songs, /songs/{id}
    - users.py:           /users, /users/{id}
    - playlists.py:       /playlists, /playlists/{id}, /playlists/{id}/songs,
                          /playlists/{id}/activities           (auth required)
    - collaborations.py:  /collaborations                      (auth required)
    - uploads.py:         /uploads/{path}
    - health.py:          /health

Handlers extract path/body parameters and the caller's id, call services,
and wrap results in the success envelope. They never catch service errors;
the global handlers in main.py format them.
"""
