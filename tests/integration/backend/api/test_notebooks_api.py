"""
Integration Tests for Notebooks API.

Notes reference notebooks by name, so these tests cover the rename
cascade and the reassignment on delete.
"""

import pytest
from httpx import AsyncClient

NOTEBOOKS = "/api/notebooks"


async def create_notebook(client: AsyncClient, headers: dict, name: str, **fields) -> dict:
    response = await client.post(NOTEBOOKS, json={"name": name, **fields}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def create_note(client: AsyncClient, headers: dict, notebook: str, **fields) -> dict:
    response = await client.post(
        "/api/notes",
        json={"title": "note", "notebook": notebook, **fields},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestNotebookCrud:
    """Tests for notebook create, read and list."""

    @pytest.mark.asyncio
    async def test_create_notebook(self, client: AsyncClient, api, auth_headers):
        """Should create a notebook with the default color."""
        response = await client.post(
            NOTEBOOKS,
            json={"name": "  Work  ", "description": "Job stuff"},
            headers=auth_headers,
        )

        data = api.assert_success(response, expected_status=201)["data"]
        assert data["name"] == "Work"
        assert data["color"] == "#268bd2"
        assert data["description"] == "Job stuff"
        assert data["noteCount"] == 0

    @pytest.mark.asyncio
    async def test_duplicate_name_conflicts(self, client: AsyncClient, api, auth_headers):
        """Should reject a second notebook with the same name."""
        await create_notebook(client, auth_headers, "Work")

        response = await client.post(NOTEBOOKS, json={"name": "Work"}, headers=auth_headers)

        api.assert_error(response, 409, "RES_CONFLICT")

    @pytest.mark.asyncio
    async def test_same_name_for_different_owners(
        self,
        client: AsyncClient,
        api,
        auth_headers,
        other_auth_headers,
    ):
        """Should scope name uniqueness to the owner."""
        await create_notebook(client, auth_headers, "Work")

        response = await client.post(NOTEBOOKS, json={"name": "Work"}, headers=other_auth_headers)

        api.assert_success(response, expected_status=201)

    @pytest.mark.asyncio
    async def test_invalid_color(self, client: AsyncClient, api, auth_headers):
        """Should reject colors that are not #RRGGBB."""
        response = await client.post(
            NOTEBOOKS,
            json={"name": "Work", "color": "blue"},
            headers=auth_headers,
        )

        api.assert_validation_error(response, field="color")

    @pytest.mark.asyncio
    async def test_list_alphabetical_with_live_counts(self, client: AsyncClient, api, auth_headers):
        """Should count only non-trashed notes filed under each notebook."""
        await create_notebook(client, auth_headers, "Zeta")
        await create_notebook(client, auth_headers, "Alpha")
        await create_note(client, auth_headers, "Alpha")
        trashed = await create_note(client, auth_headers, "Alpha")
        await client.post(f"/api/notes/{trashed['id']}/trash", headers=auth_headers)

        data = api.assert_success(await client.get(NOTEBOOKS, headers=auth_headers))["data"]

        assert [nb["name"] for nb in data] == ["Alpha", "Zeta"]
        assert [nb["noteCount"] for nb in data] == [1, 0]

    @pytest.mark.asyncio
    async def test_get_notebook(self, client: AsyncClient, api, auth_headers, other_auth_headers):
        """Should return the notebook to its owner and 404 to anyone else."""
        notebook = await create_notebook(client, auth_headers, "Work")
        await create_note(client, auth_headers, "Work")

        mine = await client.get(f"{NOTEBOOKS}/{notebook['id']}", headers=auth_headers)
        theirs = await client.get(f"{NOTEBOOKS}/{notebook['id']}", headers=other_auth_headers)

        assert api.assert_success(mine)["data"]["noteCount"] == 1
        api.assert_error(theirs, 404)


class TestNotebookUpdate:
    """Tests for PUT /api/notebooks/{id}."""

    @pytest.mark.asyncio
    async def test_rename_moves_notes(self, client: AsyncClient, api, auth_headers):
        """Should refile every note from the old name to the new one."""
        notebook = await create_notebook(client, auth_headers, "Work")
        note = await create_note(client, auth_headers, "Work")
        other = await create_note(client, auth_headers, "Home")

        response = await client.put(
            f"{NOTEBOOKS}/{notebook['id']}",
            json={"name": "Job"},
            headers=auth_headers,
        )

        data = api.assert_success(response)["data"]
        assert data["name"] == "Job"
        assert data["noteCount"] == 1
        moved = await client.get(f"/api/notes/{note['id']}", headers=auth_headers)
        untouched = await client.get(f"/api/notes/{other['id']}", headers=auth_headers)
        assert moved.json()["data"]["notebook"] == "Job"
        assert untouched.json()["data"]["notebook"] == "Home"

    @pytest.mark.asyncio
    async def test_padded_note_notebook_follows_rename(self, client: AsyncClient, api, auth_headers):
        """Should file a note under the trimmed name so counts and renames see it."""
        notebook = await create_notebook(client, auth_headers, " Work ")
        note = await create_note(client, auth_headers, " Work ")
        assert note["notebook"] == "Work"

        listed = api.assert_success(await client.get(NOTEBOOKS, headers=auth_headers))["data"]
        assert [(nb["name"], nb["noteCount"]) for nb in listed] == [("Work", 1)]

        response = await client.put(
            f"{NOTEBOOKS}/{notebook['id']}",
            json={"name": "Job"},
            headers=auth_headers,
        )

        assert api.assert_success(response)["data"]["noteCount"] == 1
        moved = await client.get(f"/api/notes/{note['id']}", headers=auth_headers)
        assert moved.json()["data"]["notebook"] == "Job"

    @pytest.mark.asyncio
    async def test_rename_does_not_touch_other_owner(
        self,
        client: AsyncClient,
        auth_headers,
        other_auth_headers,
    ):
        """Should leave another owner's notes in a same-named notebook alone."""
        notebook = await create_notebook(client, auth_headers, "Work")
        foreign = await create_note(client, other_auth_headers, "Work")

        await client.put(
            f"{NOTEBOOKS}/{notebook['id']}",
            json={"name": "Job"},
            headers=auth_headers,
        )

        response = await client.get(f"/api/notes/{foreign['id']}", headers=other_auth_headers)
        assert response.json()["data"]["notebook"] == "Work"

    @pytest.mark.asyncio
    async def test_rename_to_existing_name_conflicts(self, client: AsyncClient, api, auth_headers):
        """Should refuse the rename and leave notes where they were."""
        work = await create_notebook(client, auth_headers, "Work")
        await create_notebook(client, auth_headers, "Home")
        note = await create_note(client, auth_headers, "Work")

        response = await client.put(
            f"{NOTEBOOKS}/{work['id']}",
            json={"name": "Home"},
            headers=auth_headers,
        )

        api.assert_error(response, 409)
        after = await client.get(f"/api/notes/{note['id']}", headers=auth_headers)
        assert after.json()["data"]["notebook"] == "Work"

    @pytest.mark.asyncio
    async def test_update_color_and_clear_description(self, client: AsyncClient, api, auth_headers):
        """Should apply color and allow description to be cleared with null."""
        notebook = await create_notebook(client, auth_headers, "Work", description="desc")

        response = await client.put(
            f"{NOTEBOOKS}/{notebook['id']}",
            json={"color": "#FF0000", "description": None},
            headers=auth_headers,
        )

        data = api.assert_success(response)["data"]
        assert data["color"] == "#FF0000"
        assert data["description"] is None
        assert data["name"] == "Work"


class TestNotebookDelete:
    """Tests for DELETE /api/notebooks/{id}."""

    @pytest.mark.asyncio
    async def test_delete_reassigns_to_personal(self, client: AsyncClient, api, auth_headers):
        """Should move every note, trashed ones included, to Personal."""
        notebook = await create_notebook(client, auth_headers, "Work")
        live = await create_note(client, auth_headers, "Work")
        trashed = await create_note(client, auth_headers, "Work")
        await client.post(f"/api/notes/{trashed['id']}/trash", headers=auth_headers)

        response = await client.delete(f"{NOTEBOOKS}/{notebook['id']}", headers=auth_headers)

        assert api.assert_success(response)["data"]["reassignedNotes"] == 2
        for note in (live, trashed):
            after = await client.get(f"/api/notes/{note['id']}", headers=auth_headers)
            assert after.json()["data"]["notebook"] == "Personal"
        api.assert_error(await client.get(f"{NOTEBOOKS}/{notebook['id']}", headers=auth_headers), 404)

    @pytest.mark.asyncio
    async def test_delete_empty_notebook(self, client: AsyncClient, api, auth_headers):
        """Should report zero reassigned notes."""
        notebook = await create_notebook(client, auth_headers, "Empty")

        response = await client.delete(f"{NOTEBOOKS}/{notebook['id']}", headers=auth_headers)

        assert api.assert_success(response)["data"]["reassignedNotes"] == 0
