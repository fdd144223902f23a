from .attendee import Attendee, AttendeeTag, TagDetail
from .tag import Tag
