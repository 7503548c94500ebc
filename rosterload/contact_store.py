from sqlalchemy import Engine, inspect, select
from sqlalchemy.orm import Session, sessionmaker

from rosterload.database import build_session_factory
from rosterload.db_models import ClientContact, ContactBase
from rosterload.schemas import Record


# Feed column -> ClientContact attribute.
CONTACT_COLUMNS = {
    "first_name": "first_name",
    "last_name": "last_name",
    "city": "city",
    "county": "county",
    "zip": "zip",
    "officePhone": "office_phone",
    "mobilePhone": "mobile_phone",
}


class ContactStore:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self.session_factory: sessionmaker[Session] = build_session_factory(engine)

    def ensure_schema(self) -> None:
        ContactBase.metadata.create_all(self.engine)
        if not inspect(self.engine).has_table(ClientContact.__tablename__):
            raise RuntimeError(f"table {ClientContact.__tablename__} is missing after schema creation")

    def insert_record(self, record: Record) -> ClientContact:
        values: dict[str, str | None] = {}
        for column, attribute in CONTACT_COLUMNS.items():
            value = (record.get(column) or "").strip()
            values[attribute] = value or None

        with self.session_factory() as db:
            contact = ClientContact(**values)
            db.add(contact)
            try:
                db.commit()
            except Exception:
                db.rollback()
                raise
            db.refresh(contact)
            return contact

    def list_contacts(self) -> list[ClientContact]:
        with self.session_factory() as db:
            stmt = select(ClientContact).order_by(ClientContact.id)
            return list(db.execute(stmt).scalars().all())
