import pytest

@pytest.fixture
def user1_data():
    return {"username": "user1", "password": "password123"}

@pytest.fixture
def user2_data():
    return {"username": "user2", "password": "password123"}

class TestEndToEnd:
    def test_complete_flow(self, client, user1_data, user2_data):
        """
        Full flow over the HTTP API:
        1. two users register and log in
        2. user1 uploads two posts with tags, user2 uploads one
        3. tag autocomplete and AND search see the new tags
        4. user2 likes and favorites a post, most_liked sort follows
        5. user2 cannot edit or delete user1's post
        6. user1 replaces the tags of a post, search follows the new tags
        7. user1 deletes a post, its tag stays in the vocabulary
        """
        # 1. register and log in
        tokens = {}
        for data in (user1_data, user2_data):
            response = client.post("/api/users/register", json=data)
            assert response.status_code == 201
            response = client.post("/api/users/login", json=data)
            assert response.status_code == 200
            tokens[data["username"]] = response.json()["access_token"]
        headers_user1 = {"Authorization": f"Bearer {tokens['user1']}"}
        headers_user2 = {"Authorization": f"Bearer {tokens['user2']}"}

        # 2. uploads
        response = client.post("/api/posts", headers=headers_user1,
                               json={"content_ref": "mountain.jpg", "tags": "#Travel #mountains"})
        assert response.status_code == 201
        mountain = response.json()
        response = client.post("/api/posts", headers=headers_user1,
                               json={"content_ref": "beach.jpg", "tags": "#travel #beach"})
        beach = response.json()
        response = client.post("/api/posts", headers=headers_user2,
                               json={"content_ref": "cat.jpg", "tags": "#cat lazy sunday"})
        cat = response.json()
        assert cat["tag_names"] == ["#cat"]

        # 3. autocomplete and search
        suggestions = client.get("/api/tags/autocomplete", params={"q": "tr"}).json()
        assert suggestions == [{"name": "#travel", "count": 2}]

        data = client.get("/api/posts", params={"tags": "travel"}).json()
        assert [p["id"] for p in data["posts"]] == [beach["id"], mountain["id"]]
        data = client.get("/api/posts", params={"tags": "travel,beach"}).json()
        assert [p["id"] for p in data["posts"]] == [beach["id"]]
        data = client.get("/api/posts", params={"tags": "travel,cat"}).json()
        assert data["total_count"] == 0

        # 4. reactions
        response = client.post(f"/api/posts/{mountain['id']}/like", headers=headers_user2)
        assert response.json() == {"liked": True, "likes": 1}
        response = client.post(f"/api/posts/{mountain['id']}/favorite", headers=headers_user2)
        assert response.json() == {"favorited": True}
        data = client.get("/api/posts", params={"sort": "most_liked"}).json()
        assert data["posts"][0]["id"] == mountain["id"]
        favorites = client.get("/api/users/me/favorites", headers=headers_user2).json()
        assert [p["id"] for p in favorites["posts"]] == [mountain["id"]]

        # 5. ownership
        response = client.put(f"/api/posts/{mountain['id']}", headers=headers_user2, json={"tags": "#mine"})
        assert response.status_code == 403
        response = client.delete(f"/api/posts/{mountain['id']}", headers=headers_user2)
        assert response.status_code == 403

        # 6. replace tags
        response = client.put(f"/api/posts/{beach['id']}", headers=headers_user1, json={"tags": "#sea #sand"})
        assert response.status_code == 200
        assert response.json()["tag_names"] == ["#sea", "#sand"]
        data = client.get("/api/posts", params={"tags": "beach"}).json()
        assert data["total_count"] == 0
        data = client.get("/api/posts", params={"tags": "#sea,#sand"}).json()
        assert [p["id"] for p in data["posts"]] == [beach["id"]]

        # 7. delete
        response = client.delete(f"/api/posts/{mountain['id']}", headers=headers_user1)
        assert response.status_code == 204
        tag = client.get("/api/tags/mountains").json()
        assert tag["usage_count"] == 0
        favorites = client.get("/api/users/me/favorites", headers=headers_user2).json()
        assert favorites["total_count"] == 0
