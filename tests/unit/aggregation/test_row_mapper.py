from dataclasses import dataclass, replace
from typing import Tuple

import pytest

from src.shared.aggregation import append_unique, group_rows


@dataclass(frozen=True)
class Tag:
    id: int


@dataclass(frozen=True)
class Post:
    id: int
    title: str
    tags: Tuple[Tag, ...] = ()


def new_post(row):
    return Post(id=row["post_id"], title=row["title"])


def add_tag(post, row):
    tag = Tag(row["tag_id"]) if row["tag_id"] is not None else None
    return replace(post, tags=append_unique(post.tags, tag, lambda t: t.id))


def test_one_parent_per_id_in_first_seen_order():
    rows = [
        {"post_id": 2, "title": "b", "tag_id": 20},
        {"post_id": 1, "title": "a", "tag_id": 10},
        {"post_id": 2, "title": "b", "tag_id": 21},
        {"post_id": 2, "title": "b", "tag_id": 20},
    ]
    grouped = group_rows(rows, "post_id", new_post, add_tag)

    assert list(grouped) == [2, 1]
    assert grouped[2].tags == (Tag(20), Tag(21))
    assert grouped[1].tags == (Tag(10),)


def test_left_join_nulls_leave_collections_empty():
    grouped = group_rows([{"post_id": 1, "title": "a", "tag_id": None}], "post_id", new_post, add_tag)
    assert grouped[1].tags == ()


def test_without_fold_first_row_wins():
    rows = [{"post_id": 1, "title": "first"}, {"post_id": 1, "title": "second"}]
    grouped = group_rows(rows, "post_id", new_post)
    assert grouped[1].title == "first"


def test_empty_rows():
    assert group_rows([], "post_id", new_post, add_tag) == {}


def test_null_parent_id_is_rejected():
    with pytest.raises(ValueError):
        group_rows([{"post_id": None, "title": "x", "tag_id": None}], "post_id", new_post)


def test_missing_key_column_is_rejected():
    with pytest.raises(KeyError):
        group_rows([{"title": "x"}], "post_id", new_post)


def test_previous_parent_values_are_not_mutated():
    rows = [{"post_id": 1, "title": "a", "tag_id": 10}]
    first = group_rows(rows, "post_id", new_post, add_tag)[1]
    again = add_tag(first, {"post_id": 1, "title": "a", "tag_id": 11})
    assert first.tags == (Tag(10),)
    assert again.tags == (Tag(10), Tag(11))
