from sqlalchemy import Column, String, DateTime, Uuid
from db.database import Base
from services.time_utils import utc_now_naive
import uuid


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime, default=utc_now_naive)
