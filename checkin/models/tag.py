# checkin/models/tag.py
"""
Tag master record.

A tag names a cohort of attendees sharing one check-in scope. It may carry
a validity window, and decides whether repeated check-ins are flagged.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, String, text

from checkin.db.base_class import Base


class Tag(Base):
    __tablename__ = "tags"

    # Stored lower-cased; also the key of an attendee's tag map
    name = Column(String, primary_key=True)
    start = Column(DateTime(timezone=True), nullable=True)
    end = Column(DateTime(timezone=True), nullable=True)
    warn_on_duplicates = Column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )

    __table_args__ = (
        CheckConstraint(
            "(start IS NULL AND \"end\" IS NULL) OR "
            "(start IS NOT NULL AND \"end\" IS NOT NULL AND start < \"end\")",
            name="check_tag_window",
        ),
    )
