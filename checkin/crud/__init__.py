# checkin/crud/__init__.py

from .crud_attendee import attendee
from .crud_tag import tag
