"""Host environment abstraction and the local filesystem host."""

from simpler_prettier.host.local import LocalHost
from simpler_prettier.host.protocol import (
    CommandCallback,
    Document,
    DocumentCallback,
    Host,
    Unregister,
)

__all__ = [
    "CommandCallback",
    "Document",
    "DocumentCallback",
    "Host",
    "LocalHost",
    "Unregister",
]
