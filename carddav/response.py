"""
Plain value types for a parsed WebDAV multistatus (RFC 4918 section
13), as returned by the sync-collection and addressbook-multiget
reports.  They are produced by ``DAVResponse.multistatus()`` and carry
no reference back to the XML tree.
"""
import re
from dataclasses import dataclass
from dataclasses import field
from typing import Dict
from typing import List
from typing import Optional

from .elements import carddav
from .elements import dav

_status_re = re.compile(r"^\s*\S+\s+(\d{3})\b")


def status_code(status: Optional[str]) -> Optional[int]:
    """
    "HTTP/1.1 404 Not Found" -> 404.  None if there is no (sane) status
    """
    if not status:
        return None
    match = _status_re.match(status)
    if not match:
        return None
    return int(match.group(1))


@dataclass
class PropStat:
    status: Optional[str]
    props: Dict[str, Optional[str]] = field(default_factory=dict)

    @property
    def status_code(self) -> Optional[int]:
        return status_code(self.status)

    @property
    def etag(self) -> Optional[str]:
        return self.props.get(dav.GetEtag.tag)

    @property
    def address_data(self) -> Optional[str]:
        return self.props.get(carddav.AddressData.tag)


@dataclass
class MultiStatusResponse:
    href: str
    status: Optional[str] = None
    propstats: List[PropStat] = field(default_factory=list)

    @property
    def status_code(self) -> Optional[int]:
        return status_code(self.status)


@dataclass
class MultiStatus:
    sync_token: Optional[str] = None
    responses: List[MultiStatusResponse] = field(default_factory=list)
