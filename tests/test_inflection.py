"""
Tests for the English inflection helpers.
"""

import pytest

from restmachine_resources.inflection import camelize, classify, humanize, pluralize, singularize, underscore


class TestPluralize:
    """Test pluralize()."""

    @pytest.mark.parametrize("singular,plural", [
        ("post", "posts"),
        ("category", "categories"),
        ("status", "statuses"),
        ("box", "boxes"),
        ("person", "people"),
        ("knife", "knives"),
        ("mouse", "mice"),
        ("information", "information"),
        ("blog_post", "blog_posts"),
        ("custom_yuuseju", "custom_yuusejus"),
    ])
    def test_pluralize(self, singular, plural):
        """Test regular, irregular and uncountable words."""
        assert pluralize(singular) == plural

    @pytest.mark.parametrize("singular,plural", [
        ("post", "posts"),
        ("category", "categories"),
        ("status", "statuses"),
        ("person", "people"),
        ("knife", "knives"),
        ("analysis", "analyses"),
        ("news", "news"),
        ("blog_post", "blog_posts"),
    ])
    def test_singularize(self, singular, plural):
        """Test singularizing plurals."""
        assert singularize(plural) == singular

    def test_singularize_singular(self):
        """Test that a singular word is left alone."""
        assert singularize("post") == "post"

    def test_empty(self):
        """Test empty strings."""
        assert pluralize("") == ""
        assert singularize("") == ""


class TestCaseConversion:
    """Test underscore(), camelize(), classify() and humanize()."""

    def test_underscore(self):
        """Test CamelCase to snake_case."""
        assert underscore("BlogPosts") == "blog_posts"
        assert underscore("HTMLPage") == "html_page"
        assert underscore("Admin.BlogPost") == "admin/blog_post"

    def test_camelize(self):
        """Test snake_case to CamelCase."""
        assert camelize("blog_post") == "BlogPost"
        assert camelize("admin/blog_post") == "Admin.BlogPost"

    @pytest.mark.parametrize("name,class_name", [
        ("posts", "Post"),
        ("locations", "Location"),
        ("admin/posts", "Admin.Post"),
        ("admin/blog_posts", "Admin.BlogPost"),
        ("people", "Person"),
    ])
    def test_classify(self, name, class_name):
        """Test resource names to class names."""
        assert classify(name) == class_name

    def test_humanize(self):
        """Test underscored names to phrases."""
        assert humanize("blog_post") == "Blog post"
        assert humanize("author_id") == "Author"
