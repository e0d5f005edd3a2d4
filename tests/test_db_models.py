"""Unit tests for the ORM models defined in blogonspot.models.

These tests verify basic mapping correctness: table names, composite
primary keys, the one-row-per-pair subscription constraint, and that the
relationship views on `User` are read-only.
"""

from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import attributes

from blogonspot import models


def test_table_names():
    """Model classes expose expected __tablename__ values."""
    assert models.User.__tablename__ == "user_account"
    assert models.Post.__tablename__ == "post"
    assert models.Comment.__tablename__ == "post_comment"
    assert models.PostLike.__tablename__ == "post_like"
    assert models.PostTag.__tablename__ == "post_tag"
    assert models.Follow.__tablename__ == "follow"
    assert models.Subscription.__tablename__ == "subscription"
    assert models.Bookmark.__tablename__ == "bookmark"


def test_relation_tables_use_composite_primary_keys():
    """Likes, follows and bookmarks are keyed by the pair they relate."""
    assert {c.name for c in models.PostLike.__table__.primary_key} == {"post_id", "user_id"}
    assert {c.name for c in models.Follow.__table__.primary_key} == {"follower_id", "followee_id"}
    assert {c.name for c in models.Bookmark.__table__.primary_key} == {"user_id", "post_id"}


def test_subscription_pair_is_unique():
    constraints = [
        c for c in models.Subscription.__table__.constraints if isinstance(c, UniqueConstraint)
    ]
    assert [{col.name for col in c.columns} for c in constraints] == [
        {"subscriber_id", "creator_id"}
    ]


def test_user_email_is_unique():
    assert models.User.__table__.c.email.unique


def test_user_relationship_views_are_read_only():
    """Relationship sets on `User` are instrumented views, never written directly."""
    for name in ("posts", "following", "followers", "subscriptions", "subscribers", "bookmarks"):
        attr = getattr(models.User, name)
        assert isinstance(attr, attributes.InstrumentedAttribute)
        assert attr.property.viewonly, name


def test_post_children_cascade_on_delete():
    for name in ("comments", "likes", "bookmark_rows", "tag_rows"):
        cascade = getattr(models.Post, name).property.cascade
        assert cascade.delete and cascade.delete_orphan, name


def test_post_tags_are_rows_in_author_order():
    post = models.Post(title="t", content="c", tags=["soil", "compost"])
    assert [(row.position, row.tag) for row in post.tag_rows] == [(0, "soil"), (1, "compost")]
    assert list(post.tags) == ["soil", "compost"]
    assert {c.name for c in models.PostTag.__table__.primary_key} == {"post_id", "position"}
