# checkin/db/base_class.py

from sqlalchemy.orm import declarative_base

# Every SQLAlchemy model in the service inherits from this class.
Base = declarative_base()
