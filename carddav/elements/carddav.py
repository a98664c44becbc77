#!/usr/bin/env python
"""
Elements from RFC 6352 (CardDAV), plus the calendarserver.org getctag
property which isn't in any RFC but is offered by most servers.
"""
from typing import ClassVar
from typing import Optional

from .base import BaseElement
from .base import NamedBaseElement
from .base import ValuedBaseElement
from carddav.lib.namespace import ns


# Operations
class AddressbookQuery(BaseElement):
    tag: ClassVar[str] = ns("C", "addressbook-query")


class AddressbookMultiGet(BaseElement):
    tag: ClassVar[str] = ns("C", "addressbook-multiget")


# Filters
class Filter(BaseElement):
    """
    The top level filter of an addressbook-query.  test may be
    "anyof" (the RFC default) or "allof".
    """

    tag: ClassVar[str] = ns("C", "filter")

    def __init__(self, test: Optional[str] = None) -> None:
        super(Filter, self).__init__()
        if test is not None:
            self.attributes["test"] = test


class PropFilter(NamedBaseElement):
    tag: ClassVar[str] = ns("C", "prop-filter")

    def __init__(self, name: str, test: Optional[str] = None) -> None:
        super(PropFilter, self).__init__(name=name)
        if test is not None:
            self.attributes["test"] = test


class ParamFilter(NamedBaseElement):
    tag: ClassVar[str] = ns("C", "param-filter")


class IsNotDefined(BaseElement):
    tag: ClassVar[str] = ns("C", "is-not-defined")


class TextMatch(ValuedBaseElement):
    """
    match_type is one of equals, contains (default), starts-with and
    ends-with.
    """

    tag: ClassVar[str] = ns("C", "text-match")

    def __init__(
        self,
        value,
        collation: str = "i;unicode-casemap",
        negate: bool = False,
        match_type: str = "contains",
    ) -> None:
        super(TextMatch, self).__init__(value=value)
        self.attributes["collation"] = collation
        self.attributes["match-type"] = match_type
        if negate:
            self.attributes["negate-condition"] = "yes"


class Limit(BaseElement):
    tag: ClassVar[str] = ns("C", "limit")


class NResults(ValuedBaseElement):
    tag: ClassVar[str] = ns("C", "nresults")


# Components / Data


class AddressData(BaseElement):
    tag: ClassVar[str] = ns("C", "address-data")


class Prop(NamedBaseElement):
    """A vCard property name inside address-data, i.e. Prop("FN")"""

    tag: ClassVar[str] = ns("C", "prop")


# Properties
class AddressbookDescription(ValuedBaseElement):
    tag: ClassVar[str] = ns("C", "addressbook-description")


class MaxResourceSize(ValuedBaseElement):
    tag: ClassVar[str] = ns("C", "max-resource-size")


class GetCTag(ValuedBaseElement):
    tag: ClassVar[str] = ns("CS", "getctag")
