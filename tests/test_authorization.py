"""
Tests for policies, the policy authorizer and parameter filtering.
"""

from typing import ClassVar

import pytest

from restmachine_resources import (
    NotAuthorizedError,
    ParameterMissingError,
    Policy,
    PolicyAuthorizer,
    PolicyNotFoundError,
    PolicyRegistry,
    Request,
    ResourceController,
    permit,
    require,
)
from restmachine_resources.testing import MemoryModel
from tests.app import Post, PostPolicy, PostsController


class Comment(MemoryModel):
    text: str = ""


class OwnerPolicy(Policy):
    def update(self):
        return self.user is not None and self.record.author_id == self.user


def owner_registry():
    registry = PolicyRegistry()

    @registry.register(Post)
    class OwnedPostPolicy(OwnerPolicy):
        permitted_attributes = ["title"]

    return registry


class TestPolicyDefaults:
    """Test the base Policy."""

    def test_denies_everything(self):
        """Test that every query is denied by default."""
        policy = Policy(None, object())

        assert not any(getattr(policy, query)() for query in
                       ("list", "show", "new", "create", "edit", "update", "destroy"))

    def test_new_and_edit_delegate(self):
        """Test that new asks create and edit asks update."""
        class Permissive(Policy):
            def create(self):
                return True

            def update(self):
                return True

        policy = Permissive(None, object())
        assert policy.new()
        assert policy.edit()

    def test_scope_is_unchanged(self):
        """Test that the default scope returns the collection as given."""
        assert Policy.Scope(None, [1, 2]).resolve() == [1, 2]

    def test_permitted_attributes_for_action(self):
        """Test that an action-specific list wins over the general one."""
        class Restricted(Policy):
            permitted_attributes = ("title", "body")
            permitted_attributes_for_update = ("body",)

        policy = Restricted(None, object())
        assert policy.permitted_attributes_for("create") == ("title", "body")
        assert policy.permitted_attributes_for("update") == ("body",)

    def test_permitted_attributes_method(self):
        """Test that permitted attributes may be computed from the user."""
        class ByUser(Policy):
            def permitted_attributes_for_create(self):
                return ["title", "author_id"] if self.user == "admin" else ["title"]

        assert ByUser("admin", None).permitted_attributes_for("create") == ["title", "author_id"]
        assert ByUser("guest", None).permitted_attributes_for("create") == ["title"]


class TestPolicyRegistry:
    """Test finding policies for models."""

    def test_registered_policy(self):
        """Test lookup of a registered policy."""
        registry = PolicyRegistry()
        registry.register(Comment)(OwnerPolicy)

        assert registry.policy_for(Comment) is OwnerPolicy

    def test_model_policy_class(self):
        """Test that a model's own policy_class wins."""
        class Note(MemoryModel):
            policy_class: ClassVar[type] = OwnerPolicy

        assert PolicyRegistry().policy_for(Note) is OwnerPolicy

    def test_missing_policy(self):
        """Test that an unknown model raises PolicyNotFoundError."""
        with pytest.raises(PolicyNotFoundError):
            PolicyRegistry().policy_for(Comment)


class TestPolicyAuthorizer:
    """Test PolicyAuthorizer."""

    def setup_method(self):
        self.registry = PolicyRegistry()
        self.registry.register(Post)(OwnerPolicy)
        self.authorizer = PolicyAuthorizer(self.registry)

    def test_allowed_returns_record(self):
        """Test that an allowed query returns the record."""
        post = Post(author_id=7)

        assert self.authorizer.authorize(7, post, "update") is post

    def test_denied_raises(self):
        """Test that a denied query raises with its details."""
        post = Post(author_id=7)

        with pytest.raises(NotAuthorizedError) as exc_info:
            self.authorizer.authorize(8, post, "update")

        error = exc_info.value
        assert error.query == "update"
        assert error.record is post
        assert isinstance(error.policy, OwnerPolicy)
        assert str(error) == "not allowed to update this Post"

    def test_class_record(self):
        """Test authorizing a model class finds the class's policy."""
        with pytest.raises(NotAuthorizedError) as exc_info:
            self.authorizer.authorize(7, Post, "list")

        assert str(exc_info.value) == "not allowed to list this Post"

    def test_unknown_query_denied(self):
        """Test that a query the policy does not define is denied."""
        with pytest.raises(NotAuthorizedError):
            self.authorizer.authorize(7, Post(author_id=7), "publish")

    def test_policy_scope(self):
        """Test that the policy's scope filters the collection."""
        PostPolicy.Scope.allow_ids = {2}
        authorizer = PolicyAuthorizer()

        scoped = authorizer.policy_scope(None, Post, [Post(id=1), Post(id=2)])

        assert [post.id for post in scoped] == [2]


class TestCurrentUser:
    """Test the current user collaborator."""

    def test_anonymous_by_default(self):
        """Test that controllers are anonymous without a provider."""
        assert PostsController().current_user is None

    def test_injected_provider(self):
        """Test that the provider sees the request and is asked once."""
        calls = []

        class HeaderUser:
            def current_user(self, request):
                calls.append(request)
                return int(request.headers.get("X-User"))

        post = Post.create(title="Mine", author_id=5)

        class OwnedPostsController(ResourceController, actions=["update"], model=Post):
            authorizer = PolicyAuthorizer(owner_registry())

        request = Request(params={"id": str(post.id), "post": {"title": "Still mine"}},
                          headers={"X-User": "5"})
        controller = OwnedPostsController(request, current_user_provider=HeaderUser())
        controller.process("update")

        assert controller.current_user == 5
        assert len(calls) == 1
        assert Post.find(post.id).title == "Still mine"


class TestParams:
    """Test strong parameters."""

    def test_require_returns_nested_params(self):
        """Test that require returns the resource's attributes."""
        assert require({"post": {"title": "x"}}, "post") == {"title": "x"}

    @pytest.mark.parametrize("params", [{}, {"post": {}}, {"post": "title"}, {"post": None}])
    def test_require_missing(self, params):
        """Test that missing, empty or scalar values raise ParameterMissingError."""
        with pytest.raises(ParameterMissingError) as exc_info:
            require(params, "post")

        assert str(exc_info.value) == "param is missing or the value is empty: post"

    def test_permit(self):
        """Test that only allowed keys are kept."""
        assert permit({"title": "x", "admin": True}, ["title", "body"]) == {"title": "x"}

    def test_controller_filters_through_policy(self):
        """Test that the controller's permitted attributes follow the policy and action."""
        PostPolicy.permitted_attributes = ["title", "body"]
        controller = PostsController(Request(params={"post": {"title": "x", "body": "y", "id": 3}}))
        controller.action_name = "create"

        assert controller.permitted_attributes(Post()) == {"title": "x", "body": "y"}
