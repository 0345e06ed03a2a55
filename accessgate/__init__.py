"""Role-based access control building blocks: role managers, policy storage and adapters, watcher interfaces and caches."""

__version__ = "0.1.0"

__all__ = [
    "cache",
    "conditional",
    "file_adapter",
    "persist",
    "rbac",
    "role_manager",
    "string_adapter",
]