# checkin/models/attendee.py
"""
Local attendee record and its per-tag check-in state.

The attendee's identity is owned by the registration service; this table
only keeps the id, a display name and emails captured on first check-in.
Each AttendeeTag is the TagState for one (attendee, tag) pair and owns an
append-only list of TagDetail audit rows.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.orm.collections import attribute_keyed_dict

from checkin.db.base_class import Base


class Attendee(Base):
    __tablename__ = "attendees"

    # Same value as the upstream user id
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False, default="")
    emails = Column(JSON, nullable=False, default=list)

    tag_states = relationship(
        "AttendeeTag",
        back_populates="attendee",
        collection_class=attribute_keyed_dict("tag_name"),
        cascade="all, delete-orphan",
    )


class AttendeeTag(Base):
    __tablename__ = "attendee_tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    attendee_id = Column(
        String, ForeignKey("attendees.id", ondelete="CASCADE"), nullable=False, index=True
    )
    tag_name = Column(
        String, ForeignKey("tags.name", ondelete="CASCADE"), nullable=False, index=True
    )

    # Mirrors of the most recent detail
    checked_in = Column(Boolean, nullable=False, default=False)
    checked_in_date = Column(DateTime(timezone=True), nullable=True)
    checked_in_by = Column(String, nullable=True)
    checkin_success = Column(Boolean, nullable=False, default=False)

    # Position in details of the last successful entry, None if there is none
    last_successful_position = Column(Integer, nullable=True)

    version = Column(Integer, nullable=False)

    attendee = relationship("Attendee", back_populates="tag_states")
    tag = relationship("Tag", lazy="joined")
    details = relationship(
        "TagDetail",
        order_by="TagDetail.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("attendee_id", "tag_name", name="unique_attendee_tag"),
    )
    __mapper_args__ = {"version_id_col": version}

    @property
    def last_successful_checkin(self):
        if self.last_successful_position is None:
            return None
        return self.details[self.last_successful_position]


class TagDetail(Base):
    __tablename__ = "tag_details"

    id = Column(Integer, primary_key=True, autoincrement=True)
    attendee_tag_id = Column(
        Integer, ForeignKey("attendee_tags.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False)
    checked_in = Column(Boolean, nullable=False)
    checked_in_date = Column(DateTime(timezone=True), nullable=False)
    checked_in_by = Column(String, nullable=False)
    checkin_success = Column(Boolean, nullable=False)

    __table_args__ = (
        UniqueConstraint("attendee_tag_id", "position", name="unique_detail_position"),
    )
