# checkin/forwarding/__init__.py
"""
Delegation of GraphQL sub-selections to the registration service.
"""

from checkin.forwarding.analyzer import QueryDocument
from checkin.forwarding.registration import RegistrationClient
from checkin.forwarding.reshaper import reshape
from checkin.forwarding.spec import ForwardSpec
from checkin.forwarding.stitcher import StitchedQuery, stitch

__all__ = [
    "ForwardSpec",
    "QueryDocument",
    "RegistrationClient",
    "StitchedQuery",
    "reshape",
    "stitch",
]
