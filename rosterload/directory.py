import logging

from sqlalchemy import Engine, or_, select, text
from sqlalchemy.orm import Session, sessionmaker

from rosterload.database import build_session_factory
from rosterload.db_models import DirectoryBase, DirectoryUser, OrgUnit


logger = logging.getLogger(__name__)

DESTRUCTIVE = "destructive"
CREATE_IF_ABSENT = "create_if_absent"


class DirectoryError(RuntimeError):
    pass


def org_unit_path(container: str, domain_name: str) -> str:
    labels = [label for label in domain_name.split(".") if label]
    return ",".join([f"OU={container}", *(f"DC={label}" for label in labels)])


def build_user_attributes(record, *, domain_name: str, org_unit: str) -> dict[str, object]:
    given_name = record["First_Name"].strip()
    surname = record["Last_Name"].strip()
    sam_account_name = record["samAccount"].strip()
    full_name = f"{given_name} {surname}"

    return {
        "name": full_name,
        "display_name": full_name,
        "given_name": given_name,
        "surname": surname,
        "sam_account_name": sam_account_name,
        "user_principal_name": f"{sam_account_name}@{domain_name}",
        "postal_code": _optional(record, "PostalCode"),
        "mobile_phone": _optional(record, "MobilePhone"),
        "office_phone": _optional(record, "OfficePhone"),
        "org_unit": org_unit,
        "enabled": True,
    }


def _optional(record, name: str) -> str | None:
    value = (record.get(name) or "").strip()
    return value or None


class SqlDirectory:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self.session_factory: sessionmaker[Session] = build_session_factory(engine)

    def check_available(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        DirectoryBase.metadata.create_all(self.engine)

    def ensure_org_unit(self, path: str, *, policy: str = DESTRUCTIVE) -> OrgUnit:
        if policy not in (DESTRUCTIVE, CREATE_IF_ABSENT):
            raise ValueError(f"unknown container policy: {policy}")

        with self.session_factory() as db:
            existing = self._get_org_unit(db, path)
            if existing is not None:
                if policy == CREATE_IF_ABSENT:
                    logger.info("organizational unit exists, reusing %s", path)
                    return existing
                # Every account under the unit goes with it.
                logger.warning("deleting organizational unit %s and %d account(s)", path, len(existing.users))
                db.delete(existing)
                db.commit()

            org_unit = OrgUnit(distinguished_name=path, name=path.split(",", 1)[0].removeprefix("OU="))
            db.add(org_unit)
            db.commit()
            db.refresh(org_unit)
            logger.info("created organizational unit %s", path)
            return org_unit

    def create_user(self, attrs: dict[str, object]) -> DirectoryUser:
        sam_account_name = str(attrs["sam_account_name"])
        user_principal_name = str(attrs["user_principal_name"])

        with self.session_factory() as db:
            org_unit = self._get_org_unit(db, str(attrs["org_unit"]))
            if org_unit is None:
                raise DirectoryError(f"organizational unit not found: {attrs['org_unit']}")

            stmt = select(DirectoryUser.id).where(
                or_(
                    DirectoryUser.sam_account_name == sam_account_name,
                    DirectoryUser.user_principal_name == user_principal_name,
                )
            )
            if db.execute(stmt).first() is not None:
                raise DirectoryError(f"account already exists: {sam_account_name}")

            user = DirectoryUser(
                org_unit_id=org_unit.id,
                sam_account_name=sam_account_name,
                user_principal_name=user_principal_name,
                name=str(attrs["name"]),
                display_name=str(attrs["display_name"]),
                given_name=str(attrs["given_name"]),
                surname=str(attrs["surname"]),
                postal_code=attrs.get("postal_code"),
                mobile_phone=attrs.get("mobile_phone"),
                office_phone=attrs.get("office_phone"),
                enabled=bool(attrs.get("enabled", True)),
            )
            db.add(user)
            try:
                db.commit()
            except Exception:
                db.rollback()
                raise
            db.refresh(user)
            return user

    def list_users(self, path: str) -> list[DirectoryUser]:
        with self.session_factory() as db:
            stmt = (
                select(DirectoryUser)
                .join(OrgUnit)
                .where(OrgUnit.distinguished_name == path)
                .order_by(DirectoryUser.id)
            )
            return list(db.execute(stmt).scalars().all())

    def _get_org_unit(self, db: Session, path: str) -> OrgUnit | None:
        stmt = select(OrgUnit).where(OrgUnit.distinguished_name == path)
        return db.execute(stmt).scalar_one_or_none()
