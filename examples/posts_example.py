"""
Example of a posts resource with policies, strong parameters and flash messages.

This example shows how to:
1. Register a model and its policy
2. Enable a subset of the REST actions on a controller
3. Override a hook, and an action that still uses the default behavior
4. Carry flash messages from one request to the next
5. Rescue authorization errors as discreet 404s
"""

import logging
from typing import Optional

from pydantic import field_validator

from restmachine_resources import (
    NotAuthorizedError,
    Policy,
    Request,
    ResourceController,
    Translator,
    policies,
    register_model,
    rescue_response,
    set_translator,
)
from restmachine_resources.testing import ControllerClient, MemoryModel, before_destroy

logging.basicConfig(level=logging.INFO)


@register_model
class Post(MemoryModel):
    title: str = ""
    body: str = ""
    author: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_present(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("can't be blank")
        return value

    @before_destroy
    def keep_pinned(self):
        return not self.title.startswith("[pinned]")


@policies.register(Post)
class PostPolicy(Policy):
    """Anyone may read; only signed-in users may write, and only their own posts."""

    permitted_attributes = ("title", "body")

    def list(self):
        return True

    def show(self):
        return True

    def create(self):
        return self.user is not None

    def update(self):
        return self.user is not None and self.record.author == self.user

    def destroy(self):
        return self.update()

    class Scope(Policy.Scope):
        def resolve(self):
            return [post for post in self.scope if not post.title.startswith("[draft]")]


class HeaderUser:
    """Reads the user name from an X-User header."""

    def current_user(self, request):
        return request.headers.get("X-User")


class PostsController(ResourceController, actions=["list", "show", "new", "create", "update", "destroy"]):
    current_user_provider = HeaderUser()

    def new_model(self):
        post = super().new_model()
        post.author = self.current_user
        return post

    def destroy(self):
        self.default_action("destroy", on_success=lambda: self.redirect_to("/posts", 303))


def setup_translations():
    translator = Translator()
    translator.store_translations("en", {
        "flash": {
            "success": "Done.",
            "error": "That didn't work.",
            "create": {"success": "{{ resource_capitalized }} published."},
            "destroy": {"error_html": "This <strong>{{ resource_name }}</strong> is pinned."},
        }
    })
    set_translator(translator)


def main():
    setup_translations()
    client = ControllerClient(PostsController)

    print("\n=== Create ===")
    result = client.perform("create", {"post": {"title": "Hello", "admin": True}}, headers={"X-User": "ada"})
    print(f"Redirected to {result.redirected_to}")
    print(f"Next request sees: {client.next_flash().to_dict()}")
    post_id = result.controller.resource.id

    print("\n=== Create (invalid) ===")
    result = client.perform("create", {"post": {"title": "  "}}, headers={"X-User": "ada"})
    print(f"Rendered {result.rendered} with {result.flash.to_dict()}")
    print(f"Errors: {result.controller.resource.errors}")

    print("\n=== List ===")
    Post.create(title="[draft] Secret", author="ada")
    result = client.list()
    print(f"Listed: {[post.title for post in result.controller.resources]}")

    print("\n=== Destroy a pinned post ===")
    pinned = Post.create(title="[pinned] Rules", author="ada")
    result = client.perform("destroy", {"id": str(pinned.id)},
                            headers={"X-User": "ada", "Referer": "/posts"})
    print(f"Redirected back to {result.redirected_to}: {client.next_flash()['error']}")

    print("\n=== Update someone else's post ===")
    try:
        client.perform("update", {"id": str(post_id), "post": {"title": "Mine now"}}, headers={"X-User": "eve"})
    except NotAuthorizedError as e:
        response = rescue_response(e)
        print(f"{response.status_code}: {response.body}")

    print("\n=== Show directly ===")
    response = PostsController(Request(params={"id": str(post_id)})).process("show")
    print(f"{response.template}: {response.context['post']}")


if __name__ == "__main__":
    main()
