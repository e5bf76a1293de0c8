import pytest
from fastapi import status

@pytest.fixture
def tagged_posts(authenticated_client):
    for tags in ("#cat #dog", "#cat", "#camera", "#dog #cat"):
        authenticated_client.post("/api/posts", json={"content_ref": "p.jpg", "tags": tags})

class TestAutocomplete:
    def test_suggestions(self, client, tagged_posts):
        response = client.get("/api/tags/autocomplete", params={"q": "#ca"})
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == [
            {"name": "#cat", "count": 3},
            {"name": "#camera", "count": 1},
        ]

    def test_uses_last_word(self, client, tagged_posts):
        data = client.get("/api/tags/autocomplete", params={"q": "#cat do"}).json()
        assert data == [{"name": "#dog", "count": 2}]

    def test_empty_query(self, client, tagged_posts):
        assert client.get("/api/tags/autocomplete").json() == []
        assert client.get("/api/tags/autocomplete", params={"q": "#"}).json() == []

    def test_no_match(self, client, tagged_posts):
        assert client.get("/api/tags/autocomplete", params={"q": "zzz"}).json() == []

class TestPopular:
    def test_popular(self, client, tagged_posts):
        data = client.get("/api/tags/popular").json()
        assert [t["name"] for t in data] == ["#cat", "#dog", "#camera"]
        assert [t["count"] for t in data] == [3, 2, 1]

    def test_limit(self, client, tagged_posts):
        assert len(client.get("/api/tags/popular", params={"limit": 1}).json()) == 1
        assert client.get("/api/tags/popular", params={"limit": 0}).status_code == 422

class TestTagDetail:
    def test_get_tag(self, client, tagged_posts):
        for name in ("cat", "CAT"):
            response = client.get(f"/api/tags/{name}")
            assert response.status_code == status.HTTP_200_OK
            data = response.json()
            assert data["name"] == "#cat"
            assert data["usage_count"] == 3
            assert "id" in data
            assert "created_at" in data

    def test_missing_tag(self, client):
        assert client.get("/api/tags/nothing").status_code == status.HTTP_404_NOT_FOUND

    def test_tag_posts_redirects_to_search(self, client, tagged_posts):
        response = client.get("/api/tags/dog/posts")
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["tags"] == ["#dog"]
        assert data["total_count"] == 2
