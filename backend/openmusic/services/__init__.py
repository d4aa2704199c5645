"""
OpenMusic API — Services Layer
===============================

What:  The only code that talks to the database. Routes call services;
       services issue SQLAlchemy statements on the request's AsyncSession.

Service Inventory:
    - SongsService:                   songs CRUD and list filters
    - AlbumsService:                  albums CRUD and cover upload
    - UsersService:                   registration and profile lookup
    - PlaylistsService:               playlists, playlist songs, access checks
    - CollaborationsService:          playlist collaborators
    - PlaylistSongActivitiesService:  append-only playlist activity log
    - FileService:                    cover image validation and storage

Every service is stateless and exposed as a module-level singleton.
PlaylistsService holds a reference to the CollaborationsService it consults
for access checks.
"""
