"""Tests for posts, media, likes and comments — the server-side read-modify-write paths."""
from tests.conftest import create_test_post, signup


def _comment(user: dict, comment_id: str = "c100", text: str = "nice") -> dict:
    return {
        "id": comment_id,
        "user_id": user["user_id"],
        "user_name": user["name"],
        "text": text,
        "timestamp": "2026-10-19T12:00:00+00:00",
    }


def _media(client, campus, **fields) -> dict:
    resp = client.post(f"/api/media/?actor_user_id={campus['admin']['user_id']}", json={
        "club_id": campus["club"]["club_id"],
        "event_id": campus["event"]["event_id"],
        "image_url": "https://picsum.photos/800/600",
        **fields,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestPosts:
    def test_new_post_has_empty_set_and_log(self, client, campus):
        post = campus["post"]
        assert post["liked_by"] == []
        assert post["comments"] == []
        assert post["user_name"] == campus["admin"]["name"]

    def test_feed_newest_first(self, client, campus):
        club_id, student_id = campus["club"]["club_id"], campus["student"]["user_id"]
        newer = create_test_post(client, club_id, student_id, content="Second")
        feed = client.get(f"/api/posts/?club_id={club_id}").json()
        assert [p["post_id"] for p in feed] == [newer["post_id"], campus["post"]["post_id"]]

    def test_client_supplied_id(self, client, campus):
        resp = client.post("/api/posts/", json={
            "post_id": "p-client-1", "club_id": campus["club"]["club_id"],
            "user_id": campus["student"]["user_id"], "content": "Mine",
        })
        assert resp.status_code == 201
        assert resp.json()["post_id"] == "p-client-1"

        again = client.post("/api/posts/", json={
            "post_id": "p-client-1", "club_id": campus["club"]["club_id"],
            "user_id": campus["student"]["user_id"], "content": "Mine again",
        })
        assert again.status_code == 409

    def test_empty_content_rejected(self, client, campus):
        resp = client.post("/api/posts/", json={
            "club_id": campus["club"]["club_id"], "user_id": campus["student"]["user_id"], "content": "",
        })
        assert resp.status_code == 422


class TestLikes:
    """toggle_member flips one actor in the set; the client never sends the set."""

    def test_like_then_unlike(self, client, campus):
        url = f"/api/posts/{campus['post']['post_id']}/like"
        student_id = campus["student"]["user_id"]
        assert client.post(url, json={"user_id": student_id}).json()["liked_by"] == [student_id]
        assert client.post(url, json={"user_id": student_id}).json()["liked_by"] == []

    def test_likes_from_different_users_accumulate(self, client, campus):
        url = f"/api/posts/{campus['post']['post_id']}/like"
        other = signup(client, name="Other")
        client.post(url, json={"user_id": campus["student"]["user_id"]})
        liked_by = client.post(url, json={"user_id": other["user_id"]}).json()["liked_by"]
        assert sorted(liked_by) == sorted([campus["student"]["user_id"], other["user_id"]])

    def test_legacy_duplicates_removed(self, client, db, campus):
        from clix.models.post import Post
        student_id = campus["student"]["user_id"]
        post = db.query(Post).filter(Post.post_id == campus["post"]["post_id"]).first()
        post.liked_by = [student_id, student_id, "u-other"]
        db.commit()

        resp = client.post(f"/api/posts/{post.post_id}/like", json={"user_id": student_id})
        assert resp.json()["liked_by"] == ["u-other"]

    def test_like_missing_post(self, client, campus):
        resp = client.post("/api/posts/nope/like", json={"user_id": campus["student"]["user_id"]})
        assert resp.status_code == 404


class TestComments:
    """append_entry appends once per entry id."""

    def test_append(self, client, campus):
        resp = client.post(f"/api/posts/{campus['post']['post_id']}/comments", json=_comment(campus["student"]))
        assert resp.status_code == 200
        comments = resp.json()["comments"]
        assert [c["id"] for c in comments] == ["c100"]
        assert comments[0]["text"] == "nice"

    def test_retry_is_idempotent(self, client, campus):
        url = f"/api/posts/{campus['post']['post_id']}/comments"
        client.post(url, json=_comment(campus["student"]))
        resp = client.post(url, json=_comment(campus["student"]))
        assert resp.status_code == 200
        assert len(resp.json()["comments"]) == 1

    def test_order_is_append_order(self, client, campus):
        url = f"/api/posts/{campus['post']['post_id']}/comments"
        for cid in ("c3", "c1", "c2"):
            client.post(url, json=_comment(campus["student"], comment_id=cid, text=cid))
        comments = client.get(f"/api/posts/?club_id={campus['club']['club_id']}").json()[0]["comments"]
        assert [c["id"] for c in comments] == ["c3", "c1", "c2"]

    def test_empty_text_rejected(self, client, campus):
        resp = client.post(
            f"/api/posts/{campus['post']['post_id']}/comments", json=_comment(campus["student"], text=""),
        )
        assert resp.status_code == 422


class TestMedia:
    def test_club_admin_publishes(self, client, campus):
        media = _media(client, campus, caption="Event Highlights")
        assert media["liked_by"] == [] and media["comments"] == []
        listed = client.get(f"/api/media/?club_id={campus['club']['club_id']}").json()
        assert [m["media_id"] for m in listed] == [media["media_id"]]

    def test_student_cannot_publish(self, client, campus):
        resp = client.post(f"/api/media/?actor_user_id={campus['student']['user_id']}", json={
            "club_id": campus["club"]["club_id"], "image_url": "https://picsum.photos/1",
        })
        assert resp.status_code == 403

    def test_like_and_comment_media(self, client, campus):
        media = _media(client, campus)
        student = campus["student"]
        liked = client.post(f"/api/media/{media['media_id']}/like", json={"user_id": student["user_id"]})
        assert liked.json()["liked_by"] == [student["user_id"]]
        commented = client.post(f"/api/media/{media['media_id']}/comments", json=_comment(student))
        assert [c["id"] for c in commented.json()["comments"]] == ["c100"]
