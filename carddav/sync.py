"""
Synchronization of a local cache of address objects with a CardDAV
addressbook.

The application implements a ``SyncHandler`` and hands it over to
``CardDavSync.synchronize`` together with the token it got back from
the previous synchronization (or an empty string the first time).
The handler is told about every address object that has been added,
changed or deleted since, and the new token is returned.

Two ways of finding out what has changed are supported:

* the sync-collection REPORT (RFC 6578), if the server supports it.
  Only the changes since the sync-token are transferred.
* otherwise, a PROPFIND listing all ETags in the addressbook, which is
  compared with the ETags of the local cache.  If the server provides a
  ctag and it is unchanged since last time, this is skipped.

The vCards of changed objects are then fetched with an
addressbook-multiget REPORT if available, and one by one if not.
"""
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Any
from typing import Dict
from typing import Iterable
from typing import List
from typing import Optional
from typing import TYPE_CHECKING

from . import vcard
from .elements import carddav
from .elements import dav
from .lib import error
from .lib.url import decoded_path
from .lib.url import normalize_path
from .lib.url import same_path
from .response import MultiStatusResponse

if TYPE_CHECKING:
    from .collection import AddressBook
    from .davclient import DAVClient

log = logging.getLogger("carddav")


@dataclass
class ChangedObject:
    """An address object that is new or has been modified on the server"""

    uri: str
    etag: Optional[str]
    vcf: Optional[str] = None
    vcard: Any = None


def _path_key(uri) -> str:
    return normalize_path(decoded_path(uri))


@dataclass
class SyncResult:
    """
    The outcome of one synchronization pass.  An uri will never be
    listed both as changed and deleted, the last classification wins.

    Changed and deleted objects are kept in dicts keyed on the
    normalized path, in the order they were first reported.
    """

    token: str
    truncated: bool = False
    _changed: Dict[str, ChangedObject] = field(
        default_factory=dict, init=False, repr=False
    )
    _deleted: Dict[str, str] = field(default_factory=dict, init=False, repr=False)

    @property
    def changed(self) -> List[ChangedObject]:
        return list(self._changed.values())

    @property
    def deleted(self) -> List[str]:
        return list(self._deleted.values())

    def add_changed(self, uri: str, etag: Optional[str]) -> ChangedObject:
        key = _path_key(uri)
        self._deleted.pop(key, None)
        obj = self._changed.get(key)
        if obj is None:
            obj = ChangedObject(uri=uri, etag=etag)
            self._changed[key] = obj
        else:
            obj.etag = etag
        return obj

    def add_deleted(self, uri: str) -> None:
        key = _path_key(uri)
        self._changed.pop(key, None)
        self._deleted.setdefault(key, uri)

    def add_vcf_for_changed_obj(
        self, uri: str, etag: Optional[str], vcf: Optional[str]
    ) -> bool:
        """
        Attaches the vCard data fetched from the server.  Returns False
        if the uri isn't among the changed objects.
        """
        obj = self._changed.get(_path_key(uri))
        if obj is None:
            return False
        if etag:
            obj.etag = etag
        obj.vcf = vcf
        return True

    def missing_vcf(self) -> List[ChangedObject]:
        return [x for x in self._changed.values() if x.vcf is None]

    def create_vcards(self, logger: Optional[logging.Logger] = None) -> bool:
        """
        Parses the vCard data of all changed objects.  Returns False if
        the data is missing or broken for any of them, those objects
        will have vcard set to None.
        """
        logger = logger or log
        ret = True
        for obj in self._changed.values():
            if obj.vcf is None:
                logger.warning(f"No vCard data for {obj.uri}")
                ret = False
                continue
            try:
                obj.vcard = vcard.parse(obj.vcf)
            except ValueError as e:
                logger.warning(f"Could not parse vCard of {obj.uri}: {e}")
                obj.vcard = None
                ret = False
        return ret


class EntryKind(Enum):
    """What a response in a multistatus means for the synchronization"""

    TRUNCATED = "truncated"
    COLLECTION = "collection"
    DELETED = "deleted"
    CHANGED = "changed"
    UNEXPECTED = "unexpected"


def classify_entry(response: MultiStatusResponse, collection_url) -> EntryKind:
    """
    RFC 6578, section 3.5:

    * If the result set is truncated, the response has a status of 507
      (Insufficient Storage) for the request-URI.
    * Removed members have one DAV:status "404 Not Found" and no
      propstat.
    * Changed (or new) members have at least one propstat and no
      status.
    """
    code = response.status_code
    if same_path(collection_url, response.href):
        if code == 507:
            return EntryKind.TRUNCATED
        return EntryKind.COLLECTION
    if code == 404:
        return EntryKind.DELETED
    if response.propstats:
        return EntryKind.CHANGED
    return EntryKind.UNEXPECTED


class SyncHandler:
    """
    Interface for the application side of a synchronization.  During
    the synchronization, the methods are called for each changed or
    deleted address object, to be handled in an application-specific
    manner.
    """

    def address_object_changed(self, uri: str, etag: Optional[str], card) -> None:
        """
        Called for each changed address object, including new ones.
        card is a vobject component containing (at least, if
        available) the requested vCard properties, or None if the
        vCard could not be retrieved or parsed.
        """
        raise NotImplementedError()

    def address_object_deleted(self, uri: str) -> None:
        """Called for each deleted address object"""
        raise NotImplementedError()

    def get_existing_vcard_etags(self) -> Mapping:
        """
        Returns ``{uri: etag}`` for all address objects in the local
        cache.  The uris are paths, i.e. ``/abooks/bob/contacts/a.vcf``.

        This is needed if the server does not support the
        sync-collection report, it is called once per synchronization.
        The returned mapping is not modified.
        """
        raise NotImplementedError()


class ChangeDetector:
    """
    Finds out what has changed in an addressbook since the state
    identified by a token.
    """

    def __init__(
        self,
        client: "DAVClient",
        abook: "AddressBook",
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.client = client
        self.abook = abook
        self.log = logger or log

    def detect_changes(self, previous_token: str) -> SyncResult:
        raise NotImplementedError()


class SyncCollectionDetector(ChangeDetector):
    """Change detection through the sync-collection REPORT"""

    def detect_changes(self, previous_token: str) -> SyncResult:
        abook_url = self.abook.get_uri()
        multistatus = self.client.sync_collection(abook_url, previous_token)

        if not multistatus.sync_token:
            raise error.SyncProtocolError(
                url=abook_url,
                reason="No sync token contained in response to sync-collection REPORT",
            )

        result = SyncResult(token=multistatus.sync_token)

        for response in multistatus.responses:
            kind = classify_entry(response, abook_url)
            if kind is EntryKind.TRUNCATED:
                result.truncated = True
            elif kind is EntryKind.COLLECTION:
                self.log.debug("Ignoring response on addressbook itself")
            elif kind is EntryKind.DELETED:
                result.add_deleted(response.href)
            elif kind is EntryKind.CHANGED:
                for propstat in response.propstats:
                    if propstat.status_code in (200, 201):
                        result.add_changed(response.href, propstat.etag)
            else:
                self.log.warning(
                    f"Unexpected response element in sync-collection result: {response}"
                )

        return result


class ETagDiffDetector(ChangeDetector):
    """
    Change detection by comparing the ETags of all address objects on
    the server with the ETags of the local cache.
    """

    def __init__(
        self,
        client: "DAVClient",
        abook: "AddressBook",
        handler: SyncHandler,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super(ETagDiffDetector, self).__init__(client, abook, logger)
        self.handler = handler

    def detect_changes(self, previous_token: str = "") -> SyncResult:
        abook_url = self.abook.get_uri()

        responses = self.client.find_properties(
            abook_url, [carddav.GetCTag(), dav.GetEtag(), dav.SyncToken()], 1
        )

        ## uri -> etag for the local cache.  This is a working copy,
        ## entries are removed when seen on the server so that only
        ## the deleted ones remain.
        local_state: Dict[str, Optional[str]] = dict(
            self.handler.get_existing_vcard_etags()
        )

        result = SyncResult(token="")
        for href, props in responses.items():
            if self.client.compare_url_paths(href, abook_url):
                result.token = (
                    props.get(carddav.GetCTag.tag)
                    or props.get(dav.SyncToken.tag)
                    or ""
                )
                if not result.token:
                    self.log.info(
                        "The server provides no token that identifies the addressbook version"
                    )
                continue

            etag = props.get(dav.GetEtag.tag)
            if etag is None:
                self.log.warning(f"Server did not provide an ETag for {href}, skipping")
                continue

            ## hrefs from a parsed response are decoded paths already
            uri = decoded_path(href)
            if uri not in local_state or local_state[uri] != etag:
                result.add_changed(uri, etag)
            local_state.pop(uri, None)

        for uri in local_state:
            result.add_deleted(uri)
        return result


class CardDavSync:
    """
    Synchronizes an addressbook with the local state of the
    application.  A logger may be given, otherwise the "carddav"
    logger is used.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.log = logger or log

    def synchronize(
        self,
        abook: "AddressBook",
        handler: SyncHandler,
        requested_vcard_props: Iterable[str] = (),
        prev_sync_token: str = "",
    ) -> str:
        """
        Performs a synchronization of the given addressbook.

        If the server truncates the sync-collection result, the
        changes received so far are handed to the handler and the
        report is repeated with the intermediate token, until the
        server reports everything.

        Returns:
          The sync token corresponding to the just synchronized (or
          slightly earlier) state of the addressbook.
        """
        requested_vcard_props = list(requested_vcard_props)
        token = prev_sync_token or ""
        while True:
            sync_result = self._detect_changes(abook, handler, token)
            self._process(abook, handler, sync_result, requested_vcard_props)
            if not sync_result.truncated:
                return sync_result.token
            if sync_result.token == token:
                self.log.warning(
                    "Server truncated the sync-collection result without advancing the sync token, giving up"
                )
                return sync_result.token
            self.log.debug(
                "Sync-collection result was truncated, continuing with the new token"
            )
            token = sync_result.token

    def _detect_changes(
        self, abook: "AddressBook", handler: SyncHandler, prev_sync_token: str
    ) -> SyncResult:
        client = abook.client

        ## If sync-collection is supported by the server, attempt
        ## synchronization using the report.  Errors are not caught.
        if abook.supports_sync_collection():
            self.log.debug(
                f"Attempting sync using sync-collection report of {abook.get_uri()}"
            )
            return self.sync_collection(client, abook, prev_sync_token)

        ## if the server supports getctag, take a short cut if nothing changed
        new_sync_token = abook.get_ctag()
        if prev_sync_token and new_sync_token and prev_sync_token == new_sync_token:
            self.log.debug(
                f"Skipping sync of up-to-date addressbook (by ctag) {abook.get_uri()}"
            )
            return SyncResult(token=prev_sync_token)

        self.log.debug(
            f"Attempting sync by ETag comparison against local state of {abook.get_uri()}"
        )
        return self.determine_changes_via_etags(client, abook, handler)

    def _process(
        self,
        abook: "AddressBook",
        handler: SyncHandler,
        sync_result: SyncResult,
        requested_vcard_props: List[str],
    ) -> None:
        for del_uri in sync_result.deleted:
            handler.address_object_deleted(del_uri)

        if not sync_result.changed:
            return

        self.multiget_changes(abook.client, abook, sync_result, requested_vcard_props)

        if not sync_result.create_vcards(self.log):
            self.log.warning(
                "Not for all changed objects, the VCard data was provided by the server"
            )

        for obj in sync_result.changed:
            handler.address_object_changed(obj.uri, obj.etag, obj.vcard)

    def sync_collection(
        self, client: "DAVClient", abook: "AddressBook", prev_sync_token: str
    ) -> SyncResult:
        return SyncCollectionDetector(client, abook, self.log).detect_changes(
            prev_sync_token
        )

    def determine_changes_via_etags(
        self, client: "DAVClient", abook: "AddressBook", handler: SyncHandler
    ) -> SyncResult:
        return ETagDiffDetector(client, abook, handler, self.log).detect_changes()

    def multiget_changes(
        self,
        client: "DAVClient",
        abook: "AddressBook",
        sync_result: SyncResult,
        requested_vcard_props: Iterable[str] = (),
    ) -> None:
        """
        Fetches the vCards of all changed objects, with one
        addressbook-multiget REPORT if the server supports it.
        Objects the server did not deliver are fetched one by one.
        """
        if not sync_result.changed:
            return

        if abook.supports_multiget():
            requested_uris = [x.uri for x in sync_result.changed]
            multistatus = client.multiget(
                abook.get_uri(), requested_uris, requested_vcard_props
            )
            for response in multistatus.responses:
                if not response.propstats:
                    self.log.warning(
                        f"Unexpected response element in multiget result: {response}"
                    )
                    continue
                for propstat in response.propstats:
                    if propstat.status_code != 200:
                        self.log.warning(
                            f"Unexpected status {propstat.status} for {response.href} in multiget result"
                        )
                        continue
                    if not sync_result.add_vcf_for_changed_obj(
                        response.href, propstat.etag, propstat.address_data
                    ):
                        self.log.warning(
                            f"Server delivered {response.href} in multiget result, which was not asked for"
                        )

        ## fill all vCards where multiget did not provide data
        for obj in sync_result.missing_vcf():
            self.log.debug(f"Fetching {obj.uri} individually")
            fetched = client.get_address_object(obj.uri)
            obj.vcf = fetched["vcf"]
            if fetched.get("etag"):
                obj.etag = fetched["etag"]
