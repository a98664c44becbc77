"""
I'm trying to be consistent with the terminology in the RFCs:

An AddressBook is a collection of address object resources (RFC 6352
section 5.2), each address object resource holds exactly one vCard.

The AddressBook offers the metadata the synchronization engine needs
(ctag, supported reports), single card operations and the
addressbook-query report.
"""
import logging
from typing import Any
from typing import Dict
from typing import Iterable
from typing import Optional

from . import vcard
from .davobject import DAVObject
from .elements import carddav
from .elements import dav

log = logging.getLogger("carddav")


class AddressBook(DAVObject):
    """
    An addressbook collection on a CardDAV server.  Collection
    properties are fetched on first use and cached, use refresh() to
    fetch them again.
    """

    PROPS = [
        dav.DisplayName(),
        carddav.GetCTag(),
        carddav.AddressbookDescription(),
        carddav.MaxResourceSize(),
    ]
    MULTI_VALUE_PROPS = [dav.SupportedReportSet()]
    ## supported-report-set holds <supported-report><report><sync-collection/></report></supported-report>
    MULTI_VALUE_XPATH = ".//{DAV:}report/*"

    _loaded = False

    def refresh(self) -> Dict[str, Any]:
        """
        Fetches the collection properties from the server in one
        PROPFIND request.
        """
        props = self.get_properties(
            self.PROPS, self.MULTI_VALUE_PROPS, xpath=self.MULTI_VALUE_XPATH
        )
        self._loaded = True
        return props

    def _cached_props(self) -> Dict[str, Any]:
        if not self._loaded:
            self.refresh()
        return self.props

    def get_uri(self) -> str:
        return str(self.url)

    def get_name(self) -> str:
        name = self._cached_props().get(dav.DisplayName.tag)
        if name:
            return name
        return self.url.strip_trailing_slash().path.split("/")[-1]

    def get_ctag(self, use_cached: bool = False) -> Optional[str]:
        """
        The ctag changes whenever anything in the addressbook changes.
        By default a fresh value is fetched from the server.
        """
        if use_cached:
            return self._cached_props().get(carddav.GetCTag.tag)
        return self.get_property(carddav.GetCTag())

    def _supports_report(self, report_tag: str) -> bool:
        reports = self._cached_props().get(dav.SupportedReportSet.tag) or []
        return report_tag in reports

    def supports_sync_collection(self) -> bool:
        return self._supports_report(dav.SyncCollection.tag)

    def supports_multiget(self) -> bool:
        return self._supports_report(carddav.AddressbookMultiGet.tag)

    def get_details(self) -> str:
        desc = "Addressbook %s\n" % self.get_name()
        desc += "    URI: %s\n" % self.url
        for prop_name, prop_val in self._cached_props().items():
            if isinstance(prop_val, list):
                prop_val = ", ".join(str(x) for x in prop_val)
            desc += "    %s: %s\n" % (prop_name, prop_val)
        return desc

    def get_card(self, uri) -> Dict[str, Any]:
        """
        Retrieves an address object from the addressbook collection and
        parses it.

        Returns:
          ``{"etag": etag, "vcf": vCard text, "vcard": vobject component}``
        """
        response = self.client.get_address_object(uri)
        response["vcard"] = vcard.parse(response["vcf"])
        return response

    def create_card(self, card) -> Dict[str, Optional[str]]:
        """
        Stores a new vCard in the addressbook.  A UID is added if the
        card doesn't have one, the card is stored as <UID>.vcf.

        Returns:
          ``{"uri": path, "etag": etag}``
        """
        uid = vcard.ensure_uid(card)
        vcard.validate(card)
        return self.client.create_resource(
            vcard.serialize(card), self.url.join(uid + ".vcf")
        )

    def update_card(self, uri, card, etag: Optional[str]) -> Optional[str]:
        """
        Overwrites an existing address object.  If the etag is given and
        the card has been changed on the server since, a PutError is
        raised.

        Returns:
          The new etag if provided by the server
        """
        vcard.validate(card)
        return self.client.update_resource(vcard.serialize(card), uri, etag)

    def delete_card(self, uri) -> None:
        self.client.delete_resource(uri)

    def query(
        self,
        filter: carddav.Filter,
        vcard_props: Iterable[str] = (),
        limit: Optional[int] = None,
    ) -> Dict[str, Dict[str, Any]]:
        """
        Searches the addressbook with an addressbook-query REPORT.

        Args:
          filter: a carddav.Filter element, i.e.
            ``carddav.Filter() + (carddav.PropFilter("EMAIL") + carddav.TextMatch("@example.com"))``
          vcard_props: if given, the server is asked to only return those vCard properties
          limit: ask the server for at most this many results

        Returns:
          ``{uri: {"etag": etag, "vcf": text, "vcard": vobject component}}``
        """
        multistatus = self.client.addressbook_query(
            self.url, filter, vcard_props=vcard_props, limit=limit
        )
        results: Dict[str, Dict[str, Any]] = {}
        for response in multistatus.responses:
            if self.client.compare_url_paths(response.href, self.url):
                ## 507 for a limited result set, and some servers
                ## list the collection itself
                continue
            for propstat in response.propstats:
                if propstat.status_code != 200 or propstat.address_data is None:
                    continue
                results[response.href] = {
                    "etag": propstat.etag,
                    "vcf": propstat.address_data,
                    "vcard": vcard.parse(propstat.address_data),
                }
        return results

    def __str__(self) -> str:
        return "%s (%s)" % (self.get_name(), self.url)
