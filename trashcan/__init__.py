"""trashcan: one funnel for every error in a Python process.

Wrap callbacks, raise errors explicitly, bridge futures and third-party
emitters, and catch uncaught exceptions; every path ends on the same
``"error"`` topic, where file and email sinks (or any callable) listen.
"""

__version__ = "0.2.0"
__description__ = "Process-wide error funnel with file and email sinks"

from trashcan.core.channel import ERROR_TOPIC, DispatchChannel
from trashcan.core.wrapper import GuardedCallback
from trashcan.funnel import Funnel
from trashcan.routing.sinks.email import EmailSink
from trashcan.routing.sinks.local_file import FileSink

__all__ = [
    "ERROR_TOPIC",
    "DispatchChannel",
    "EmailSink",
    "FileSink",
    "Funnel",
    "GuardedCallback",
    "__version__",
]
