from core.config import settings


async def test_feed_is_newest_first_and_viewer_relative(client, create_user, auth_headers, create_post):
    alice = await create_user("alice")
    bob = await create_user("bob")
    first = await create_post(alice, content="first")
    await create_post(bob, content="second")
    await client.post(f"/posts/{first['post_id']}/like", headers=auth_headers(bob))

    anonymous = await client.get("/feed")
    assert anonymous.status_code == 200
    assert [p["content"] for p in anonymous.json()] == ["second", "first"]
    assert not any(p["liked_by_viewer"] for p in anonymous.json())

    as_bob = (await client.get("/feed", headers=auth_headers(bob))).json()
    assert [p["owned_by_viewer"] for p in as_bob] == [True, False]
    assert [p["liked_by_viewer"] for p in as_bob] == [False, True]
    assert as_bob[1]["like_count"] == 1


async def test_feed_caps_comment_threads(client, create_user, auth_headers, create_post, monkeypatch):
    monkeypatch.setattr(settings, "FEED_COMMENT_LIMIT", 2)
    alice = await create_user("alice")
    created = await create_post(alice)
    for i in range(3):
        await client.post(
            f"/posts/{created['post_id']}/comments", json={"content": f"c{i}"}, headers=auth_headers(alice)
        )

    feed = (await client.get("/feed")).json()
    assert [c["content"] for c in feed[0]["comments"]] == ["c1", "c2"]
    assert feed[0]["comment_count"] == 3

    detail = (await client.get(f"/posts/{created['post_id']}")).json()
    assert len(detail["comments"]) == 3


async def test_saved_feed_requires_auth(client):
    assert (await client.get("/feed/saved")).status_code == 401


async def test_follow_scenario(client, create_user, auth_headers):
    alice = await create_user("alice")
    await create_user("bob")

    followed = await client.post("/profile/follow", json={"username": "bob"}, headers=auth_headers(alice))
    assert followed.status_code == 200
    assert followed.json()["message"] == "User followed successfully"

    again = await client.post("/profile/follow", json={"username": "bob"}, headers=auth_headers(alice))
    assert again.status_code == 200
    assert again.json()["message"] == "Already following this user"

    mine = (await client.get("/profile", headers=auth_headers(alice))).json()
    assert mine["profile"]["following_count"] == 1
    assert mine["profile"]["is_current_user_profile"] is True

    bob_profile = (await client.get("/profile/bob", headers=auth_headers(alice))).json()["profile"]
    assert bob_profile["followers_count"] == 1
    assert bob_profile["is_following"] is True
    assert bob_profile["is_current_user_profile"] is False

    unfollowed = await client.post("/profile/unfollow", json={"username": "bob"}, headers=auth_headers(alice))
    assert unfollowed.json()["message"] == "User unfollowed successfully"
    again = await client.post("/profile/unfollow", json={"username": "bob"}, headers=auth_headers(alice))
    assert again.json()["message"] == "You are not following this user"

    bob_profile = (await client.get("/profile/bob")).json()["profile"]
    assert bob_profile["followers_count"] == 0
    assert bob_profile["is_following"] is False


async def test_follow_errors(client, create_user, auth_headers):
    alice = await create_user("alice")

    self_follow = await client.post("/profile/follow", json={"username": "alice"}, headers=auth_headers(alice))
    assert self_follow.status_code == 400

    unknown = await client.post("/profile/follow", json={"username": "ghost"}, headers=auth_headers(alice))
    assert unknown.status_code == 404

    anonymous = await client.post("/profile/follow", json={"username": "alice"})
    assert anonymous.status_code == 401


async def test_profile_page(client, create_user, auth_headers, create_post):
    alice = await create_user("alice")
    await create_post(alice, content="old")
    await create_post(alice, content="new")

    page = (await client.get("/profile/alice")).json()
    assert page["profile"]["username"] == "alice"
    assert page["profile"]["profile_picture_url"] == settings.DEFAULT_AVATAR_URL
    assert page["profile"]["is_current_user_profile"] is False
    assert [p["content"] for p in page["posts"]] == ["new", "old"]


async def test_profile_lookup_errors(client):
    assert (await client.get("/profile")).status_code == 401
    assert (await client.get("/profile/ghost")).status_code == 404


async def test_edit_profile_replaces_picture(client, create_user, auth_headers, png_bytes, blob_store):
    alice = await create_user("alice")
    headers = auth_headers(alice)

    first = await client.put(
        "/profile", data={"bio": "hello there"}, files={"image": ("me.png", png_bytes, "image/png")}, headers=headers
    )
    assert first.status_code == 200, first.text
    old_url = first.json()["profile_picture_url"]
    assert old_url in blob_store.puts
    assert first.json()["bio"] == "hello there"

    second = await client.put(
        "/profile", files={"image": ("me2.jpg", png_bytes, "image/jpeg")}, headers=headers
    )
    assert second.status_code == 200
    assert second.json()["profile_picture_url"] != old_url
    assert second.json()["bio"] == "hello there"
    assert blob_store.deletes == [old_url]


async def test_edit_profile_validation(client, create_user, auth_headers, blob_store):
    alice = await create_user("alice")
    headers = auth_headers(alice)

    too_long = await client.put("/profile", data={"bio": "x" * 2001}, headers=headers)
    assert too_long.status_code == 400

    not_image = await client.put(
        "/profile", files={"image": ("me.gif", b"GIF89a", "image/gif")}, headers=headers
    )
    assert not_image.status_code == 400
    assert blob_store.puts == []
