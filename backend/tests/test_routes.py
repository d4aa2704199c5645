"""
OpenMusic API — HTTP Endpoint Tests
====================================

What:  Full request/response cycles through the real app (middleware, route
       tables, token verification, error handlers) on an SQLite session.

What we test:
    ✅ Success envelopes and camelCase keys
    ✅ Error body format and status codes (400, 401, 403, 404, 422)
    ✅ Playlist sharing end to end, including the activity log
    ✅ Cover upload and serving
"""

from unittest.mock import patch

import pytest

from openmusic.services.file_service import file_service


async def register(client, username: str) -> str:
    response = await client.post(
        "/users",
        json={"username": username, "password": "secret", "fullname": username.title()},
    )
    assert response.status_code == 201
    return response.json()["data"]["userId"]


async def add_song(client, title: str = "A", **overrides) -> str:
    body = {"title": title, "year": 2020, "performer": "X", "genre": "pop", "duration": 180}
    body.update(overrides)
    response = await client.post("/songs", json=body)
    assert response.status_code == 201
    return response.json()["data"]["songId"]


class TestSongsEndpoints:

    @pytest.mark.asyncio
    async def test_song_crud(self, test_client, sample_song_payload):
        response = await test_client.post("/songs", json=sample_song_payload)
        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "success"
        song_id = body["data"]["songId"]

        response = await test_client.get(f"/songs/{song_id}")
        assert response.status_code == 200
        assert response.json()["data"]["song"] == {"id": song_id, **sample_song_payload}

        edited = {**sample_song_payload, "title": "B"}
        response = await test_client.put(f"/songs/{song_id}", json=edited)
        assert response.status_code == 200
        assert response.json()["status"] == "success"
        assert (await test_client.get(f"/songs/{song_id}")).json()["data"]["song"]["title"] == "B"

        assert (await test_client.delete(f"/songs/{song_id}")).status_code == 200
        assert (await test_client.get(f"/songs/{song_id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_list_filters(self, test_client):
        await add_song(test_client, "Foo", performer="Ann")
        await add_song(test_client, "Bar", performer="Ann")

        response = await test_client.get("/songs", params={"title": "fo"})
        assert [s["title"] for s in response.json()["data"]["songs"]] == ["Foo"]

        response = await test_client.get("/songs", params={"performer": "ann"})
        assert len(response.json()["data"]["songs"]) == 2

    @pytest.mark.asyncio
    async def test_not_found_error_body(self, test_client):
        response = await test_client.get("/songs/song-missing", headers={"X-Request-ID": "req-42"})

        assert response.status_code == 404
        assert response.headers["X-Request-ID"] == "req-42"
        body = response.json()
        assert body["error"] == "not_found"
        assert "song-missing" in body["message"]
        assert body["request_id"] == "req-42"

    @pytest.mark.asyncio
    async def test_unknown_album_is_invariant_error(self, test_client):
        response = await test_client.post(
            "/songs",
            json={"title": "A", "year": 2020, "performer": "X", "genre": "pop", "albumId": "album-nope"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "invariant_error"

    @pytest.mark.asyncio
    async def test_schema_errors_stay_422(self, test_client):
        response = await test_client.post("/songs", json={"title": "A"})
        assert response.status_code == 422


class TestUsersEndpoints:

    @pytest.mark.asyncio
    async def test_register_and_profile(self, test_client):
        user_id = await register(test_client, "alice")

        response = await test_client.get(f"/users/{user_id}")
        assert response.json()["data"]["user"] == {"id": user_id, "username": "alice", "fullname": "Alice"}

    @pytest.mark.asyncio
    async def test_duplicate_username(self, test_client):
        await register(test_client, "alice")
        response = await test_client.post(
            "/users", json={"username": "alice", "password": "x", "fullname": "Other"}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "invariant_error"


class TestAuthentication:

    @pytest.mark.asyncio
    async def test_missing_token(self, test_client):
        response = await test_client.get("/playlists")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["error"] == "authentication_error"

    @pytest.mark.asyncio
    async def test_bad_token(self, test_client):
        response = await test_client.post(
            "/playlists", json={"name": "x"}, headers={"Authorization": "Bearer nope"}
        )
        assert response.status_code == 401


class TestPlaylistsEndpoints:

    @pytest.mark.asyncio
    async def test_sharing_flow(self, test_client, auth_header):
        owner = await register(test_client, "owner")
        guest = await register(test_client, "guest")
        song_id = await add_song(test_client, "Shared Song")

        response = await test_client.post("/playlists", json={"name": "Mix"}, headers=auth_header(owner))
        assert response.status_code == 201
        playlist_id = response.json()["data"]["playlistId"]

        songs_url = f"/playlists/{playlist_id}/songs"
        response = await test_client.post(songs_url, json={"songId": song_id}, headers=auth_header(owner))
        assert response.status_code == 201

        # Not shared yet
        response = await test_client.get(songs_url, headers=auth_header(guest))
        assert response.status_code == 403
        assert response.json()["error"] == "authorization_error"

        # Only the owner may share
        collab = {"playlistId": playlist_id, "userId": guest}
        assert (await test_client.post("/collaborations", json=collab, headers=auth_header(guest))).status_code == 403
        response = await test_client.post("/collaborations", json=collab, headers=auth_header(owner))
        assert response.status_code == 201
        assert response.json()["data"]["collaborationId"].startswith("collab-")

        response = await test_client.get(songs_url, headers=auth_header(guest))
        assert response.status_code == 200
        playlist = response.json()["data"]["playlist"]
        assert playlist["username"] == "owner"
        assert [s["id"] for s in playlist["songs"]] == [song_id]

        response = await test_client.get("/playlists", headers=auth_header(guest))
        assert [p["id"] for p in response.json()["data"]["playlists"]] == [playlist_id]

        response = await test_client.request(
            "DELETE", songs_url, json={"songId": song_id}, headers=auth_header(guest)
        )
        assert response.status_code == 200

        response = await test_client.get(f"/playlists/{playlist_id}/activities", headers=auth_header(owner))
        data = response.json()["data"]
        assert data["playlistId"] == playlist_id
        assert [(a["username"], a["title"], a["action"]) for a in data["activities"]] == [
            ("owner", "Shared Song", "add"),
            ("guest", "Shared Song", "delete"),
        ]

        # Collaborators cannot delete the playlist itself
        assert (await test_client.delete(f"/playlists/{playlist_id}", headers=auth_header(guest))).status_code == 403
        assert (await test_client.delete(f"/playlists/{playlist_id}", headers=auth_header(owner))).status_code == 200
        assert (await test_client.get(songs_url, headers=auth_header(owner))).status_code == 404

    @pytest.mark.asyncio
    async def test_missing_playlist_is_404_before_403(self, test_client, auth_header):
        stranger = await register(test_client, "stranger")
        response = await test_client.get("/playlists/playlist-nope/songs", headers=auth_header(stranger))
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_song_and_duplicates(self, test_client, auth_header):
        owner = await register(test_client, "owner")
        song_id = await add_song(test_client)
        playlist_id = (
            await test_client.post("/playlists", json={"name": "Mix"}, headers=auth_header(owner))
        ).json()["data"]["playlistId"]
        songs_url = f"/playlists/{playlist_id}/songs"

        response = await test_client.post(songs_url, json={"songId": "song-nope"}, headers=auth_header(owner))
        assert response.status_code == 404

        await test_client.post(songs_url, json={"songId": song_id}, headers=auth_header(owner))
        response = await test_client.post(songs_url, json={"songId": song_id}, headers=auth_header(owner))
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_collaborator_must_exist(self, test_client, auth_header):
        owner = await register(test_client, "owner")
        playlist_id = (
            await test_client.post("/playlists", json={"name": "Mix"}, headers=auth_header(owner))
        ).json()["data"]["playlistId"]

        response = await test_client.post(
            "/collaborations",
            json={"playlistId": playlist_id, "userId": "user-ghost"},
            headers=auth_header(owner),
        )
        assert response.status_code == 404

        response = await test_client.request(
            "DELETE",
            "/collaborations",
            json={"playlistId": playlist_id, "userId": "user-ghost"},
            headers=auth_header(owner),
        )
        assert response.status_code == 400


class TestAlbumsEndpoints:

    @pytest.mark.asyncio
    async def test_album_with_cover(self, test_client, sample_image_bytes):
        response = await test_client.post("/albums", json={"name": "Viva", "year": 2008})
        assert response.status_code == 201
        album_id = response.json()["data"]["albumId"]
        await add_song(test_client, "Life", albumId=album_id)

        with patch.object(file_service, "_detect_mime_type", return_value="image/png"):
            response = await test_client.post(
                f"/albums/{album_id}/covers",
                files={"cover": ("cover.png", sample_image_bytes, "image/png")},
            )
        assert response.status_code == 201

        album = (await test_client.get(f"/albums/{album_id}")).json()["data"]["album"]
        assert [s["title"] for s in album["songs"]] == ["Life"]
        cover_path = album["coverUrl"].split("/uploads/", 1)[1]

        response = await test_client.get(f"/uploads/{cover_path}")
        assert response.status_code == 200
        assert response.content == sample_image_bytes

    @pytest.mark.asyncio
    async def test_cover_for_missing_album(self, test_client, sample_image_bytes):
        response = await test_client.post(
            "/albums/album-nope/covers",
            files={"cover": ("cover.png", sample_image_bytes, "image/png")},
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_cover_with_wrong_type(self, test_client):
        album_id = (await test_client.post("/albums", json={"name": "Viva", "year": 2008})).json()["data"]["albumId"]

        response = await test_client.post(
            f"/albums/{album_id}/covers",
            files={"cover": ("notes.txt", b"plain text", "text/plain")},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_missing_upload(self, test_client):
        assert (await test_client.get("/uploads/2024/01/01/none.png")).status_code == 404


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        assert response.json()["database"] == "connected"
        assert response.json()["status"] == "healthy"
