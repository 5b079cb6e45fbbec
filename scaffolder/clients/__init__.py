"""Hosting API resource clients."""

from scaffolder.clients.repos import ReposClient
from scaffolder.clients.users import UsersClient

__all__ = [
    "ReposClient",
    "UsersClient",
]
