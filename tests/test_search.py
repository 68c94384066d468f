"""
Tests for model search objects used by the list action.
"""

import pytest

from restmachine_resources import ModelSearch, ResourceController, SearchRegistry
from restmachine_resources.testing import ControllerClient
from tests.app import Post, PostsController


class PostSearch(ModelSearch):
    def filter_title(self, records, value):
        return [post for post in records if value.lower() in post.title.lower()]


class TestModelSearch:
    """Test ModelSearch filtering."""

    def test_applies_present_filters(self):
        """Test that a present param runs its filter."""
        posts = [Post(title="Hello"), Post(title="Goodbye")]

        assert [post.title for post in PostSearch({"title": "hell"}).results(posts)] == ["Hello"]

    def test_skips_empty_and_unknown_params(self):
        """Test that empty values and unknown criteria are ignored."""
        posts = [Post(title="Hello"), Post(title="Goodbye")]

        assert PostSearch({"title": "", "author": "me"}).results(posts) == posts


class TestControllerSearch:
    """Test list with a search class."""

    def test_no_search_by_default(self):
        """Test that controllers without a search list everything."""
        assert not PostsController.has_model_search()
        with pytest.raises(LookupError):
            PostsController.model_search_class()

    def test_explicit_search_class(self):
        """Test that search_class filters the list action."""
        Post.create(title="Hello")
        Post.create(title="Goodbye")

        class SearchablePostsController(ResourceController, actions=["list"], model=Post):
            search_class = PostSearch

        result = ControllerClient(SearchablePostsController).list(q={"title": "good"})

        assert [post.title for post in result.controller.resources] == ["Goodbye"]
        assert isinstance(result.controller.search, PostSearch)
        assert result.response.context["search"] is result.controller.search

    def test_registered_search_class(self):
        """Test that a search registered as "{Model}Search" is found."""
        registry = SearchRegistry()
        registry.register(Post)(PostSearch)

        class RegisteredPostsController(ResourceController, actions=["list"], model=Post):
            search_registry = registry

        assert RegisteredPostsController.model_search_class() is PostSearch
        assert "PostSearch" in registry

    def test_search_results_are_scoped(self):
        """Test that the policy scope still applies to search results."""
        from tests.app import PostPolicy

        hidden = Post.create(title="Good news")
        shown = Post.create(title="Goodbye")
        PostPolicy.Scope.allow_ids = {shown.id}

        class SearchablePostsController(ResourceController, actions=["list"], model=Post):
            search_class = PostSearch

        result = ControllerClient(SearchablePostsController).list(q={"title": "good"})

        assert [post.id for post in result.controller.resources] == [shown.id]
        assert hidden.id not in [post.id for post in result.controller.resources]
