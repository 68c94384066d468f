"""
Pytest configuration and shared fixtures for restmachine-resources tests.

Resets stores, policies, translations and configuration between tests.
"""

import pytest

from restmachine_resources import reset_config, set_translator
from restmachine_resources.i18n import get_translator
from restmachine_resources.testing import ControllerClient
from tests.app import CATALOGUE, Post, PostPolicy, PostsController


@pytest.fixture(autouse=True)
def reset_state():
    """Give every test empty stores, default policies, config and translations."""
    reset_config()
    set_translator(None)
    get_translator().store_translations("en", CATALOGUE)
    Post.delete_all()
    PostPolicy.allow_all = True
    PostPolicy.permitted_attributes = ["title"]
    PostPolicy.Scope.allow_ids = None
    yield
    reset_config()
    set_translator(None)
    Post.delete_all()


@pytest.fixture
def translator():
    """The process-wide translator, loaded with the default catalogue."""
    return get_translator()


@pytest.fixture
def client():
    """A controller client for the posts controller."""
    return ControllerClient(PostsController)


@pytest.fixture
def post():
    """A stored post."""
    return Post.create(title="Existing")
