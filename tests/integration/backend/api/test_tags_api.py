"""
Integration Tests for Tags API.
"""

import pytest
from httpx import AsyncClient

TAGS = "/api/tags"


async def create_tag(client: AsyncClient, headers: dict, name: str, **fields) -> dict:
    response = await client.post(TAGS, json={"name": name, **fields}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestTagCrud:
    """Tests for the tag endpoints."""

    @pytest.mark.asyncio
    async def test_create_tag(self, client: AsyncClient, api, auth_headers):
        """Should create a tag with the default color."""
        response = await client.post(TAGS, json={"name": "work"}, headers=auth_headers)

        data = api.assert_success(response, expected_status=201)["data"]
        assert data["name"] == "work"
        assert data["color"] == "#268bd2"
        assert data["noteCount"] == 0

    @pytest.mark.asyncio
    async def test_duplicate_name_conflicts(self, client: AsyncClient, api, auth_headers):
        """Should reject an existing name for the same owner."""
        await create_tag(client, auth_headers, "work")

        response = await client.post(TAGS, json={"name": "work"}, headers=auth_headers)

        api.assert_error(response, 409, "RES_CONFLICT")

    @pytest.mark.asyncio
    async def test_names_are_case_sensitive(self, client: AsyncClient, api, auth_headers):
        """Should treat Work and work as different tags."""
        await create_tag(client, auth_headers, "work")

        response = await client.post(TAGS, json={"name": "Work"}, headers=auth_headers)

        api.assert_success(response, expected_status=201)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("color", ["red", "#12345", "#GGGGGG", "268bd2"])
    async def test_invalid_color(self, client: AsyncClient, api, auth_headers, color):
        """Should reject colors that are not #RRGGBB."""
        response = await client.post(
            TAGS,
            json={"name": "work", "color": color},
            headers=auth_headers,
        )

        api.assert_validation_error(response, field="color")

    @pytest.mark.asyncio
    async def test_list_with_note_counts(self, client: AsyncClient, api, auth_headers):
        """Should list tags alphabetically with their linked note counts."""
        await client.post("/api/notes", json={"title": "n1", "tags": ["b", "a"]}, headers=auth_headers)
        await client.post("/api/notes", json={"title": "n2", "tags": ["a"]}, headers=auth_headers)

        data = api.assert_success(await client.get(TAGS, headers=auth_headers))["data"]

        assert [(t["name"], t["noteCount"]) for t in data] == [("a", 2), ("b", 1)]

    @pytest.mark.asyncio
    async def test_update_tag(self, client: AsyncClient, api, auth_headers):
        """Should rename and recolor a tag, visible through its notes."""
        tag = await create_tag(client, auth_headers, "old")
        note = await client.post("/api/notes", json={"title": "n", "tags": ["old"]}, headers=auth_headers)

        response = await client.put(
            f"{TAGS}/{tag['id']}",
            json={"name": "new", "color": "#000000"},
            headers=auth_headers,
        )

        data = api.assert_success(response)["data"]
        assert data["name"] == "new"
        assert data["color"] == "#000000"
        assert data["noteCount"] == 1
        note_id = note.json()["data"]["id"]
        fetched = await client.get(f"/api/notes/{note_id}", headers=auth_headers)
        assert fetched.json()["data"]["tags"] == ["new"]

    @pytest.mark.asyncio
    async def test_rename_to_existing_conflicts(self, client: AsyncClient, api, auth_headers):
        """Should reject renaming onto another tag's name."""
        await create_tag(client, auth_headers, "a")
        b = await create_tag(client, auth_headers, "b")

        response = await client.put(f"{TAGS}/{b['id']}", json={"name": "a"}, headers=auth_headers)

        api.assert_error(response, 409)

    @pytest.mark.asyncio
    async def test_delete_unlinks_notes(self, client: AsyncClient, api, auth_headers):
        """Should remove the tag from its notes without deleting them."""
        created = await client.post(
            "/api/notes",
            json={"title": "n", "tags": ["doomed", "kept"]},
            headers=auth_headers,
        )
        note_id = created.json()["data"]["id"]
        tags = (await client.get(TAGS, headers=auth_headers)).json()["data"]
        doomed = next(t for t in tags if t["name"] == "doomed")

        response = await client.delete(f"{TAGS}/{doomed['id']}", headers=auth_headers)

        assert response.status_code == 204
        note = await client.get(f"/api/notes/{note_id}", headers=auth_headers)
        assert note.json()["data"]["tags"] == ["kept"]
        api.assert_error(await client.get(f"{TAGS}/{doomed['id']}", headers=auth_headers), 404)

    @pytest.mark.asyncio
    async def test_tags_are_owner_scoped(
        self,
        client: AsyncClient,
        api,
        auth_headers,
        other_auth_headers,
    ):
        """Should hide one owner's tags from another."""
        tag = await create_tag(client, auth_headers, "private")

        listed = await client.get(TAGS, headers=other_auth_headers)
        fetched = await client.get(f"{TAGS}/{tag['id']}", headers=other_auth_headers)
        same_name = await client.post(TAGS, json={"name": "private"}, headers=other_auth_headers)

        assert listed.json()["data"] == []
        api.assert_error(fetched, 404)
        api.assert_success(same_name, expected_status=201)
