"""
Tests for name helpers.
"""

import pytest

from blueprintkit.core.services.naming import (
    camel_case,
    dasherize,
    last_segment,
    pascal_case,
    underscore,
    words,
)


@pytest.mark.parametrize("name, expected", [
    ("BlogPost", ["blog", "post"]),
    ("blogPost", ["blog", "post"]),
    ("blog_post", ["blog", "post"]),
    ("blog-post", ["blog", "post"]),
    ("  blog post ", ["blog", "post"]),
    ("", []),
])
def test_words(name, expected):
    assert words(name) == expected


def test_case_conversions():
    assert dasherize("BlogPost") == "blog-post"
    assert underscore("blog-post") == "blog_post"
    assert pascal_case("blog-post") == "BlogPost"
    assert camel_case("blog_post") == "blogPost"


class TestLastSegment:
    def test_nested(self):
        assert last_segment("admin/posts/show") == "show"

    def test_trailing_slash(self):
        assert last_segment("posts/") == "posts"

    def test_empty(self):
        assert last_segment("") == ""
