import logging
from typing import Any
from typing import Dict
from typing import Optional
from typing import Sequence
from typing import TYPE_CHECKING
from typing import Union
from urllib.parse import ParseResult
from urllib.parse import SplitResult

from .elements.base import BaseElement
from .lib.url import URL

if TYPE_CHECKING:
    from .davclient import DAVClient

log = logging.getLogger("carddav")


"""
This file contains one class, the DAVObject which is the base class
for AddressBook.  There is some code here for handling the DAV
properties of an object.  Library users should not need to know a lot
about the DAVObject class, should never need to initialize one, but
may encounter inherited methods coming from this class.
"""


class DAVObject:
    """
    Base class for all DAV objects.  Can be instantiated by a client
    and an absolute or relative URL, or from the parent object.
    """

    url: Optional[URL] = None
    client: Optional["DAVClient"] = None

    def __init__(
        self,
        client: Optional["DAVClient"] = None,
        url: Union[str, ParseResult, SplitResult, URL, None] = None,
        props: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Default constructor.

        Args:
          client: A DAVClient instance
          url: The url for this object.  May be a full URL or a relative URL.
          props: a dict with known properties for this object
        """
        self.client = client
        self.props = props or {}
        # url may be a path relative to the carddav root
        if client and url:
            self.url = client.url.join(url)
        elif url is None:
            self.url = None
        else:
            self.url = URL.objectify(url)

    def get_property(
        self, prop: BaseElement, use_cached: bool = False, **passthrough
    ) -> Optional[str]:
        """
        Wrapper for the :class:`get_properties`, when only one property is wanted

        Args:

         prop: the property to search for
         use_cached: don't send anything to the server if we've asked before

        Other parameters are sent directly to the :class:`get_properties` method
        """
        if use_cached:
            if prop.tag in self.props:
                return self.props[prop.tag]
        foo = self.get_properties([prop], **passthrough)
        return foo.get(prop.tag, None)

    def get_properties(
        self,
        props: Sequence[BaseElement] = (),
        multi_value_props: Sequence[BaseElement] = (),
        xpath: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Get properties (PROPFIND, depth 0) for this object.

        Only properties with simple types are decoded, multi value
        properties are returned as lists (optionally with an xpath
        telling which leaf elements to pick).  The values found are
        also cached in self.props.

        Args:
         props: ``[dav.DisplayName(), ...]``

        Returns:
          ``{proptag: value, ...}``
        """
        if self.client is None:
            raise ValueError("Unexpected value None for self.client")
        if self.url is None:
            raise ValueError("Unexpected value None for self.url")

        properties = self.client.find_properties(
            self.url, props, 0, multi_value_props=multi_value_props, xpath=xpath
        )

        rc = None
        for path in properties:
            if self.client.compare_url_paths(path, self.url):
                rc = properties[path]
                break
        if rc is None:
            if len(properties) == 1:
                ## Some servers respond with a slightly different URL,
                ## i.e. without the trailing slash or the /user/ part
                ## swapped with the principal name.
                path = list(properties.keys())[0]
                log.warning(
                    "Possibly the server has a path handling problem, possibly the URL configured is wrong.\n"
                    "Path expected: %s, path found: %s\n"
                    "Continuing, probably everything will be fine" % (self.url.path, path)
                )
                rc = properties[path]
            else:
                rc = {}
        self.props.update(rc)
        return rc

    def __repr__(self) -> str:
        return "%s(%s)" % (self.__class__.__name__, self.url)
