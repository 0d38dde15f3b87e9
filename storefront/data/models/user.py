from sqlalchemy import Column, String
from storefront.data.database import Base


class UserModel(Base):
    """Profil uzytkownika - tylko dane potrzebne przy checkout (domyslny adres)."""

    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    email = Column(String(255), nullable=True)
    role = Column(String(16), nullable=False, default="user")

    default_recipient_name = Column(String(255), nullable=True)
    default_phone = Column(String(32), nullable=True)
    default_address = Column(String(512), nullable=True)
    default_postal_code = Column(String(16), nullable=True)
