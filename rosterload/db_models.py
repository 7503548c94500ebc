from datetime import UTC, datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class DirectoryBase(DeclarativeBase):
    pass


class ContactBase(DeclarativeBase):
    pass


def utc_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class OrgUnit(DirectoryBase):
    __tablename__ = "directory_org_units"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    distinguished_name: Mapped[str] = mapped_column(String(512), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(128))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)

    users: Mapped[list["DirectoryUser"]] = relationship(back_populates="org_unit", cascade="all, delete-orphan")


class DirectoryUser(DirectoryBase):
    __tablename__ = "directory_users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    org_unit_id: Mapped[int] = mapped_column(ForeignKey("directory_org_units.id", ondelete="CASCADE"), index=True)
    sam_account_name: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    user_principal_name: Mapped[str] = mapped_column(String(256), unique=True)
    name: Mapped[str] = mapped_column(String(256))
    display_name: Mapped[str] = mapped_column(String(256))
    given_name: Mapped[str] = mapped_column(String(128))
    surname: Mapped[str] = mapped_column(String(128))
    postal_code: Mapped[str | None] = mapped_column(String(32), nullable=True)
    mobile_phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    office_phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)

    org_unit: Mapped[OrgUnit] = relationship(back_populates="users")


class ClientContact(ContactBase):
    __tablename__ = "client_contacts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(128))
    last_name: Mapped[str] = mapped_column(String(128))
    city: Mapped[str] = mapped_column(String(128))
    county: Mapped[str | None] = mapped_column(String(128), nullable=True)
    zip: Mapped[str | None] = mapped_column(String(32), nullable=True)
    office_phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    mobile_phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    imported_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)
