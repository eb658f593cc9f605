"""
Locohost - see which dev servers are listening on localhost, and kill them.
"""

from .app import create_app
from .models import ProcessEntry
from .process_identifier import ProcessIdentifier
from .terminator import ProcessTerminator

__version__ = "1.0.0"
__all__ = ["create_app", "ProcessEntry", "ProcessIdentifier", "ProcessTerminator"]
