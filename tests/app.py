"""
Sample posts application shared by the tests.

A ``Post`` model, its policy and a controller enabling all seven actions.
"""

from typing import Optional

from pydantic import field_validator

from restmachine_resources import Policy, ResourceController, policies, register_model, resource_actions
from restmachine_resources.testing import MemoryModel, before_destroy

CATALOGUE = {
    "flash": {
        "success": "Success!",
        "error": "Something went wrong.",
        "create": {
            "success": "{{ resource_capitalized }} created.",
            "error": "{{ resource_capitalized }} could not be created.",
        },
        "update": {
            "success": "{{ resource_capitalized }} updated.",
        },
        "destroy": {
            "success": "{{ resource_capitalized }} deleted.",
            "error": "{{ resource_capitalized }} could not be deleted.",
        },
    }
}


@register_model
class Post(MemoryModel):
    """Post model that rejects the title "BAD!" and refuses to delete "PERMANENT!" posts."""

    title: str = ""
    body: str = ""
    author_id: Optional[int] = None

    @field_validator("title")
    @classmethod
    def title_is_not_reserved(cls, value: str) -> str:
        if value == "BAD!":
            raise ValueError("is reserved")
        return value

    @before_destroy
    def keep_permanent(self):
        return self.title != "PERMANENT!"


@policies.register(Post)
class PostPolicy(Policy):
    """Policy switched on and off by tests through class attributes."""

    allow_all = True
    permitted_attributes = ["title"]

    def list(self):
        return self.allow_all

    def show(self):
        return self.allow_all

    def create(self):
        return self.allow_all

    def update(self):
        return self.allow_all

    def destroy(self):
        return self.allow_all

    class Scope(Policy.Scope):
        allow_ids = None

        def resolve(self):
            if self.allow_ids is None:
                return self.scope
            return [post for post in self.scope if post.id in self.allow_ids]


@resource_actions()
class PostsController(ResourceController):
    """Controller answering all seven actions for posts."""

    pass
