#!/usr/bin/env python
import logging

__version__ = "0.1.0"

from .davclient import DAVClient
from .davclient import get_davclient
from .collection import AddressBook
from .sync import CardDavSync
from .sync import SyncHandler

# Silence notification of no default logging handler
log = logging.getLogger("carddav")
log.addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "AddressBook",
    "CardDavSync",
    "DAVClient",
    "SyncHandler",
    "get_davclient",
]
