from models.base_model import Base, BaseModel
from sqlalchemy import Column, String, Integer, BigInteger


class User(BaseModel, Base):
    __tablename__ = "users"

    # email is absent for Kakao-only accounts; NULLs do not collide on unique
    email = Column(String(255), nullable=True, unique=True, index=True)
    nickname = Column(String(64), nullable=False, unique=True, index=True)
    picture = Column(String(512), nullable=True)
    level = Column(Integer, nullable=False, default=1)
    experience = Column(Integer, nullable=False, default=0)
    password_hash = Column(String(255), nullable=True)
    kakao_id = Column(BigInteger, nullable=True, unique=True, index=True)
    # single session slot: overwritten on login, cleared on logout
    refresh_token = Column(String(1024), nullable=True)

    @property
    def password(self):
        raise AttributeError("Password: Write-only field")

    def __repr__(self):
        return f"<User id={self.id} nickname={self.nickname}>"
