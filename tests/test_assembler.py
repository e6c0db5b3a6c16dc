from datetime import datetime, timedelta, timezone

import pytest

from core.config import settings
from models.comment import Comment
from models.like import Like
from models.post import Post, PostImage
from models.saved_post import SavedPost
from models.user import User
from services.assembler import assemble_feed, assemble_post, assemble_profile

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)

ALICE = User(id="alice", username="alice", email="alice@example.com", password_hash="x")
BOB = User(id="bob", username="bob", email="bob@example.com", password_hash="x")


def _post(comments: int = 0, likers=(), savers=()) -> Post:
    post = Post(id="p1", user_id=ALICE.id, content="hello", created_at=NOW - timedelta(hours=1))
    post.user = ALICE
    post.images = [
        PostImage(id="i1", post_id="p1", image_url="/uploads/a.png", created_at=NOW),
        PostImage(id="i2", post_id="p1", image_url="/uploads/b.png", created_at=NOW),
    ]
    post.comments = []
    for minute in range(comments):
        comment = Comment(
            id=f"c{minute}",
            post_id="p1",
            user_id=BOB.id,
            content=f"comment {minute}",
            created_at=NOW - timedelta(minutes=comments - minute),
        )
        comment.user = BOB
        post.comments.append(comment)
    post.likes = [Like(post_id="p1", user_id=user_id) for user_id in likers]
    post.saves = [SavedPost(post_id="p1", user_id=user_id) for user_id in savers]
    return post


def test_owner_sees_post_as_owned():
    view = assemble_post(_post(), ALICE.id, now=NOW)
    assert view.owned_by_viewer is True
    assert view.user_name == "alice"
    assert view.image_urls == ["/uploads/a.png", "/uploads/b.png"]


def test_viewer_relative_flags():
    post = _post(likers=["bob"], savers=["bob", "carol"])
    as_bob = assemble_post(post, BOB.id, now=NOW)
    assert as_bob.liked_by_viewer is True
    assert as_bob.saved_by_viewer is True
    assert as_bob.owned_by_viewer is False
    assert as_bob.like_count == 1

    as_alice = assemble_post(post, ALICE.id, now=NOW)
    assert as_alice.liked_by_viewer is False
    assert as_alice.saved_by_viewer is False


@pytest.mark.parametrize("viewer_id", [None, ""])
def test_anonymous_viewer_gets_false_flags(viewer_id):
    view = assemble_post(_post(comments=1, likers=["alice"], savers=["alice"]), viewer_id, now=NOW)
    assert not view.liked_by_viewer
    assert not view.saved_by_viewer
    assert not view.owned_by_viewer
    assert not view.comments[0].created_by_viewer


def test_comments_are_oldest_first_with_age():
    view = assemble_post(_post(comments=3), BOB.id, now=NOW)
    assert [c.comment_id for c in view.comments] == ["c0", "c1", "c2"]
    assert [c.time_since_posted for c in view.comments] == ["3m ago", "2m ago", "1m ago"]
    assert all(c.created_by_viewer for c in view.comments)


def test_comment_limit_keeps_most_recent():
    view = assemble_post(_post(comments=25), None, comment_limit=20, now=NOW)
    assert view.comment_count == 25
    assert len(view.comments) == 20
    assert view.comments[0].comment_id == "c5"
    assert view.comments[-1].comment_id == "c24"


def test_detail_view_is_uncapped():
    view = assemble_post(_post(comments=25), None, now=NOW)
    assert len(view.comments) == 25


def test_feed_caps_comments(monkeypatch):
    monkeypatch.setattr(settings, "FEED_COMMENT_LIMIT", 2)
    views = assemble_feed([_post(comments=5)], None)
    assert len(views) == 1
    assert [c.comment_id for c in views[0].comments] == ["c3", "c4"]
    assert views[0].comment_count == 5


def test_profile_falls_back_to_default_avatar():
    profile = assemble_profile(BOB, followers_count=2, following_count=1, viewer_id=BOB.id, is_following=False)
    assert profile.profile_picture_url == settings.DEFAULT_AVATAR_URL
    assert profile.is_current_user_profile is True
    assert profile.followers_count == 2


def test_profile_for_another_viewer():
    user = User(id="carol", username="carol", email="c@example.com", password_hash="x",
                profile_picture_url="/uploads/carol.png", bio="hi")
    profile = assemble_profile(user, followers_count=0, following_count=0, viewer_id=None, is_following=False)
    assert profile.profile_picture_url == "/uploads/carol.png"
    assert profile.is_current_user_profile is False
    assert profile.bio == "hi"
