"""
vCard handling.  The vobject library does the actual parsing and
serializing, this module adds the few checks a CardDAV server will
insist on (RFC 6352 section 5.1: exactly one vCard per address object
resource, and a UID).
"""
import logging
import uuid
from typing import List

import vobject

from .lib.python_utilities import to_unicode

log = logging.getLogger("carddav")


def parse(text) -> "vobject.base.Component":
    """
    Parses the vCard text into a vobject component.

    Raises ValueError if the text can't be parsed or does not hold
    a VCARD.
    """
    text = to_unicode(text)
    if not text or not text.strip():
        raise ValueError("No vCard data given")
    try:
        card = vobject.readOne(text)
    except vobject.base.VObjectError as e:
        raise ValueError("Could not parse vCard data: %s" % e) from e
    if card.name != "VCARD":
        raise ValueError("Expected a VCARD component, got %s" % card.name)
    return card


def serialize(card) -> str:
    return card.serialize()


def get_uid(card):
    if "uid" in card.contents and card.uid.value:
        return card.uid.value
    return None


def ensure_uid(card) -> str:
    """
    Adds a UID to the card if it has none.  Returns the UID.
    """
    uid = get_uid(card)
    if uid is None:
        uid = str(uuid.uuid4())
        log.info(f"Adding missing UID property to new VCard ({uid})")
        if "uid" in card.contents:
            card.uid.value = uid
        else:
            card.add("uid").value = uid
    return uid


def validate(card) -> None:
    """
    Asserts that the card may be stored on a CardDAV server: it
    should be a VCARD with a UID and a formatted name (FN).

    Raises ValueError listing all the issues found.
    """
    issues: List[str] = []
    if card.name != "VCARD":
        issues.append("not a VCARD component: %s" % card.name)
    if get_uid(card) is None:
        issues.append("UID property missing or empty")
    if "fn" not in card.contents or not card.fn.value:
        issues.append("FN property missing or empty")
    for issue in issues:
        log.error(f"Issue with new VCard: {issue}")
    if issues:
        log.debug(card.serialize())
        raise ValueError("\n".join(issues))
