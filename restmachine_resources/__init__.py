"""
Rails-style resource controllers for RestMachine.

A controller declares which of the seven conventional REST actions it answers
(list, show, new, create, edit, update, destroy) and gets default behaviors for
them: locating its model by naming convention, loading and authorizing records,
filtering request parameters through policies, persisting, and leaving a localized
flash message before redirecting or re-rendering.
"""

from http import HTTPStatus

from .actions import ACTIONS, ALL_ACTIONS, ActionDescriptor, ActionName
from .authorization import (
    AnonymousUserProvider,
    Authorizer,
    CurrentUserProvider,
    Policy,
    PolicyAuthorizer,
    PolicyRegistry,
    policies,
)
from .binding import ResourceBinding, resolve_binding
from .config import ResourcesConfig, configure, get_config, reset_config
from .controller import ResourceController, ResourceState, activate, resource_actions
from .error_models import ErrorResponse, rescue_response
from .exceptions import (
    ActionNotFoundError,
    InvalidActionError,
    InvalidResourceNameError,
    MissingTranslationError,
    NotAuthorizedError,
    NotFoundError,
    ParameterMissingError,
    PolicyNotFoundError,
    ResourceError,
    UnknownModelError,
    rescue_status,
)
from .flash import Flash
from .i18n import TranslationService, Translator, get_translator, set_translator
from .messages import MessageResolver
from .models import Headers, HTTPMethod, Request, Response
from .params import ParameterFilter, PolicyParameterFilter, permit, require
from .registry import ModelRegistry, register_model
from .search import ModelSearch, SearchRegistry, searches
from .views import render, render_response

__version__ = "0.1.0"
__author__ = "RestMachine Contributors"
__license__ = "MIT"

__all__ = [
    "ResourceController",
    "ResourceState",
    "activate",
    "resource_actions",
    "ACTIONS",
    "ALL_ACTIONS",
    "ActionDescriptor",
    "ActionName",
    "ResourceBinding",
    "resolve_binding",
    "ModelRegistry",
    "register_model",
    "MessageResolver",
    "Translator",
    "TranslationService",
    "get_translator",
    "set_translator",
    "Flash",
    "Policy",
    "PolicyRegistry",
    "PolicyAuthorizer",
    "Authorizer",
    "CurrentUserProvider",
    "AnonymousUserProvider",
    "policies",
    "ParameterFilter",
    "PolicyParameterFilter",
    "require",
    "permit",
    "ModelSearch",
    "SearchRegistry",
    "searches",
    "ResourcesConfig",
    "get_config",
    "configure",
    "reset_config",
    "Request",
    "Response",
    "Headers",
    "HTTPMethod",
    "HTTPStatus",
    "ErrorResponse",
    "rescue_response",
    "rescue_status",
    "render",
    "render_response",
    "ResourceError",
    "InvalidActionError",
    "UnknownModelError",
    "InvalidResourceNameError",
    "NotAuthorizedError",
    "PolicyNotFoundError",
    "NotFoundError",
    "ActionNotFoundError",
    "ParameterMissingError",
    "MissingTranslationError",
]
