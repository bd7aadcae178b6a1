"""
SnippetBox Backend — Snippet Endpoint Tests
=============================================

What:  The snippet lifecycle over HTTP, end to end.

What we test:
    ✅ create → update → tag → filter → delete, as one user session
    ✅ duplicate, then delete the copy, leaves the original intact
    ✅ filter parameters: lenient integers, search, combination
    ✅ 400 / 404 mapping and cross-user isolation
"""

import pytest


async def create_snippet(client, headers, **body):
    body.setdefault("files", [{"filename": "a.txt", "content": "print(1)"}])
    response = await client.post("/api/snippets", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestSnippetLifecycle:

    @pytest.mark.asyncio
    async def test_create_update_tag_filter_delete(self, test_client, auth_headers):
        created = await create_snippet(test_client, auth_headers, title="hi")
        snippet_id = created["id"]

        assert len(created["files"]) == 1
        assert created["code"] == "print(1)"
        assert created["tags"] == []

        # Two files replace the one
        response = await test_client.put(
            f"/api/snippets/{snippet_id}",
            json={
                "title": "hi",
                "files": [
                    {"filename": "main.py", "content": "import lib"},
                    {"filename": "lib.py", "content": "VALUE = 2"},
                ],
            },
            headers=auth_headers,
        )
        assert response.status_code == 200

        fetched = (await test_client.get(f"/api/snippets/{snippet_id}", headers=auth_headers)).json()
        assert [(f["filename"], f["content"]) for f in fetched["files"]] == [
            ("main.py", "import lib"),
            ("lib.py", "VALUE = 2"),
        ]
        assert fetched["code"] == "import lib"

        # Tag it and filter by the tag
        tag = (await test_client.post("/api/tags", json={"name": "util"}, headers=auth_headers)).json()
        await test_client.put(
            f"/api/snippets/{snippet_id}",
            json={"title": "hi", "files": fetched["files"], "tags": [tag["id"]]},
            headers=auth_headers,
        )
        filtered = await test_client.get(
            "/api/snippets", params={"tag_id": tag["id"]}, headers=auth_headers
        )
        assert [s["id"] for s in filtered.json()] == [snippet_id]
        assert filtered.json()[0]["tags"] == [{"id": tag["id"], "name": "util"}]

        # Delete
        response = await test_client.delete(f"/api/snippets/{snippet_id}", headers=auth_headers)
        assert response.status_code == 204

        missing = await test_client.get(f"/api/snippets/{snippet_id}", headers=auth_headers)
        assert missing.status_code == 404
        assert missing.json()["message"] == "Snippet not found"
        listed = await test_client.get("/api/snippets", headers=auth_headers)
        assert listed.json() == []

    @pytest.mark.asyncio
    async def test_duplicate_then_delete_copy(self, test_client, auth_headers):
        original = await create_snippet(
            test_client,
            auth_headers,
            title="Parser",
            description="recursive descent",
            files=[
                {"filename": "parser.py", "content": "def parse(): ..."},
                {"filename": "test_parser.py", "content": "assert parse()"},
            ],
        )

        response = await test_client.post(
            f"/api/snippets/{original['id']}/duplicate", headers=auth_headers
        )
        assert response.status_code == 201
        copy = response.json()

        assert copy["id"] != original["id"]
        assert copy["title"] == "Parser (Copy)"
        assert copy["description"] == "recursive descent"
        assert [f["content"] for f in copy["files"]] == [f["content"] for f in original["files"]]

        await test_client.delete(f"/api/snippets/{copy['id']}", headers=auth_headers)
        still_there = await test_client.get(f"/api/snippets/{original['id']}", headers=auth_headers)
        assert still_there.status_code == 200
        assert len(still_there.json()["files"]) == 2


class TestSnippetValidation:

    @pytest.mark.asyncio
    async def test_missing_title_is_400(self, test_client, auth_headers):
        response = await test_client.post(
            "/api/snippets",
            json={"files": [{"filename": "a.txt", "content": "x"}]},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Title and at least one file are required"

    @pytest.mark.asyncio
    async def test_failed_update_keeps_previous_files(self, test_client, auth_headers):
        created = await create_snippet(test_client, auth_headers, title="keep")

        response = await test_client.put(
            f"/api/snippets/{created['id']}",
            json={"title": "keep", "files": []},
            headers=auth_headers,
        )
        assert response.status_code == 400

        fetched = await test_client.get(f"/api/snippets/{created['id']}", headers=auth_headers)
        assert [f["filename"] for f in fetched.json()["files"]] == ["a.txt"]

    @pytest.mark.asyncio
    async def test_non_integer_path_id_is_400(self, test_client, auth_headers):
        response = await test_client.get("/api/snippets/abc", headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_ids_too_large_to_store_are_404(self, test_client, auth_headers):
        path = "/api/snippets/99999999999999999999"
        body = {"title": "x", "files": [{"filename": "a.txt", "content": "x"}]}

        responses = [
            await test_client.get(path, headers=auth_headers),
            await test_client.put(path, json=body, headers=auth_headers),
            await test_client.post(f"{path}/duplicate", headers=auth_headers),
            await test_client.delete(path, headers=auth_headers),
        ]

        assert [r.status_code for r in responses] == [404, 404, 404, 404]
        assert responses[0].json()["message"] == "Snippet not found"

    @pytest.mark.asyncio
    async def test_unusable_tag_ids_are_skipped(self, test_client, auth_headers):
        tag = (await test_client.post("/api/tags", json={"name": "util"}, headers=auth_headers)).json()

        created = await create_snippet(
            test_client, auth_headers, title="tagged", tags=["abc", 99999999999999999999, tag["id"]]
        )

        assert created["tags"] == [{"id": tag["id"], "name": "util"}]

    @pytest.mark.asyncio
    async def test_out_of_range_category_is_400(self, test_client, auth_headers):
        response = await test_client.post(
            "/api/snippets",
            json={
                "title": "x",
                "category_id": 99999999999999999999,
                "files": [{"filename": "a.txt", "content": "x"}],
            },
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Category not found"

    @pytest.mark.asyncio
    async def test_other_users_snippet_is_404(self, test_client, auth_headers, other_headers):
        created = await create_snippet(test_client, auth_headers, title="private")

        for method in ("get", "delete"):
            response = await getattr(test_client, method)(
                f"/api/snippets/{created['id']}", headers=other_headers
            )
            assert response.status_code == 404

        duplicate = await test_client.post(
            f"/api/snippets/{created['id']}/duplicate", headers=other_headers
        )
        assert duplicate.status_code == 404
        assert (await test_client.get("/api/snippets", headers=other_headers)).json() == []


class TestSnippetFilters:

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive_over_title_description_and_code(
        self, test_client, auth_headers
    ):
        by_title = await create_snippet(test_client, auth_headers, title="Binary Search")
        by_description = await create_snippet(
            test_client, auth_headers, title="bisect", description="uses binary SEARCH"
        )
        by_code = await create_snippet(
            test_client,
            auth_headers,
            title="helper",
            files=[{"filename": "h.py", "content": "def binary_search(): pass"}],
        )
        await create_snippet(test_client, auth_headers, title="unrelated")

        response = await test_client.get(
            "/api/snippets", params={"search": "binary"}, headers=auth_headers
        )

        assert {s["id"] for s in response.json()} == {
            by_title["id"], by_description["id"], by_code["id"]
        }

    @pytest.mark.asyncio
    async def test_percent_in_search_matches_literally(self, test_client, auth_headers):
        literal = await create_snippet(test_client, auth_headers, title="100% coverage")
        await create_snippet(test_client, auth_headers, title="1000 coverage")

        response = await test_client.get(
            "/api/snippets", params={"search": "100%"}, headers=auth_headers
        )

        assert [s["id"] for s in response.json()] == [literal["id"]]

    @pytest.mark.asyncio
    async def test_non_numeric_filter_is_ignored(self, test_client, auth_headers):
        await create_snippet(test_client, auth_headers, title="one")
        await create_snippet(test_client, auth_headers, title="two")

        response = await test_client.get(
            "/api/snippets", params={"language_id": "abc", "category_id": ""}, headers=auth_headers
        )

        assert response.status_code == 200
        assert [s["title"] for s in response.json()] == ["two", "one"]

    @pytest.mark.asyncio
    async def test_filter_id_too_large_to_store_is_ignored(self, test_client, auth_headers):
        await create_snippet(test_client, auth_headers, title="one")

        response = await test_client.get(
            "/api/snippets", params={"tag_id": "99999999999999999999"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert [s["title"] for s in response.json()] == ["one"]

    @pytest.mark.asyncio
    async def test_language_and_category_filters(self, test_client, auth_headers):
        language = (await test_client.post("/api/languages", json={"name": "Python"})).json()
        category = (
            await test_client.post("/api/categories", json={"name": "Work"}, headers=auth_headers)
        ).json()
        match = await create_snippet(
            test_client, auth_headers, title="match",
            language_id=language["id"], category_id=category["id"],
        )
        await create_snippet(test_client, auth_headers, title="language only", language_id=language["id"])
        await create_snippet(test_client, auth_headers, title="category only", category_id=category["id"])

        response = await test_client.get(
            "/api/snippets",
            params={"language_id": language["id"], "category_id": category["id"]},
            headers=auth_headers,
        )

        body = response.json()
        assert [s["id"] for s in body] == [match["id"]]
        assert body[0]["language_name"] == "Python"
        assert body[0]["category_name"] == "Work"
