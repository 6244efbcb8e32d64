"""Farcaster fid resource parsing.

A login message names the account it acts for with a single SIWE resource of
the form farcaster://fids/<fid>. The fid is parsed from that URI here, both
when a message is built and whenever a message needs re-validation.
"""

import re
from collections.abc import Iterable
from typing import Protocol

from farcaster_login.result import Err, Ok, Result
from farcaster_login.services.error_classifier import classify_error
from farcaster_login.services.exceptions import LoginError, ValidationFailure

# Decimal digits only, no leading zero; fid 0 is never registered
FID_RESOURCE_PATTERN = re.compile(r"farcaster://fids/([1-9][0-9]*)", re.ASCII)

# IdRegistry fids are uint256
MAX_FID = 2**256 - 1
MAX_FID_DIGITS = len(str(MAX_FID))


class HasResources(Protocol):
    @property
    def resources(self) -> Iterable[str]: ...


def match_fid_resource(resource: str) -> int | None:
    """Return the fid named by a resource URI, or None if it is not a fid resource."""
    match = FID_RESOURCE_PATTERN.fullmatch(resource)
    if match is None or len(match.group(1)) > MAX_FID_DIGITS:
        return None
    fid = int(match.group(1))
    if fid > MAX_FID:
        return None
    return fid


def find_fid(resources: Iterable[str]) -> Result[int, LoginError]:
    """Find the single fid resource in a resource list.

    Returns:
        Ok(fid) if exactly one resource matches, otherwise Err(ValidationFailure)
    """
    try:
        fids = [fid for fid in map(match_fid_resource, resources) if fid is not None]
    except (TypeError, ValueError) as e:
        return Err(classify_error(e))
    if not fids:
        return Err(ValidationFailure("No fid resource found"))
    if len(fids) > 1:
        return Err(ValidationFailure("Multiple fid resources"))
    return Ok(fids[0])


def parse_fid(message: HasResources) -> Result[int, LoginError]:
    """Re-derive the fid from a message's resources.

    Does not trust any fid stored on the message at build time, so a message
    constructed by any path can be checked again.
    """
    return find_fid(message.resources)
