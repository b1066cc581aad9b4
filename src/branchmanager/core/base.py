"""Base classes for configuration and runtime state models.

Kept apart from config.py so that log.py can build its sink models on
top of them without importing the full configuration.
"""

from __future__ import annotations

import sys
from typing import Protocol, runtime_checkable

from pydantic import BaseModel


@runtime_checkable
class Closeable(Protocol):
    """Anything that owns a resource released by close()."""

    def close(self) -> None:
        ...


class BaseCloseable(BaseModel):
    """Model that closes its Closeable fields when it is closed.

    Closing walks the declared fields and calls close() on every child
    that supports it, so that closing the State closes the Config,
    which closes the Logger, which shuts down each sink. A failing child
    does not stop the remaining children from being closed.
    """

    def close(self):
        for field_name in self.__class__.model_fields:
            child = getattr(self, field_name, None)
            if child is None or not isinstance(child, Closeable):
                continue
            try:
                child.close()
            except Exception as e:
                # The logger may be the thing being closed
                print(
                    f"Warning: Error closing {field_name}: {e}",
                    file=sys.stderr,
                )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):  # noqa: U100
        self.close()
        return False


class BaseConfig(BaseCloseable):
    """Marker base for configuration sections (YAML/env/CLI)."""


class BaseState(BaseCloseable):
    """Marker base for runtime state sections (mutated by the workflow)."""


__all__ = ["Closeable", "BaseCloseable", "BaseConfig", "BaseState"]
