from sqlalchemy import Column, Integer, String
from studio_pos.data.database import Base

class UserModel(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False, default="staff")  # admin, staff
