from sqlalchemy.orm import Session
from pydantic import ValidationError
from janmitra.config import Settings
from janmitra.database import create_db_engine, create_session_factory
from janmitra.exceptions import JanmitraError
from janmitra.domain.model_base import Base
from janmitra.domain.user import service
from janmitra.domain.user.models import ROLES
from janmitra.domain.user.schemas import UserCreate
from janmitra.domain.session import models as session_models # noqa: F401
from janmitra.domain.issue import models as issue_models # noqa: F401
from janmitra.domain.volunteer import models as volunteer_models # noqa: F401
from getpass import getpass
import argparse
import asyncio
import logging
import sys

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="janmitra", description="Account management for the Janmitra backend.")
    sub = p.add_subparsers(dest="cmd", required=True)

    create_p = sub.add_parser("create-user", help="Create an account, admin by default.")
    create_p.add_argument("--username", required=True)
    create_p.add_argument("--email", required=True)
    create_p.add_argument("--password", help="Prompted for when omitted")
    create_p.add_argument("--role", default="admin", choices=ROLES)
    create_p.add_argument("--full-name")
    create_p.add_argument("--phone")

    delete_p = sub.add_parser("delete-user", help="Delete an account and revoke its sessions.")
    delete_p.add_argument("--user-id", required=True, type=int)

    return p

def cmd_create_user(db: Session, args: argparse.Namespace) -> int:
    password = args.password or getpass("Password: ")

    try:
        user = UserCreate(
            username=args.username,
            email=args.email,
            password=password,
            role=args.role,
            full_name=args.full_name,
            phone=args.phone
        )
    except ValidationError as e:
        print(f"Invalid user data:\n{e}", file=sys.stderr)
        return 2

    db_user = asyncio.run(service.create_user(db, user))
    print(f"Created {db_user.role} '{db_user.username}' with id {db_user.id}")
    return 0

def cmd_delete_user(db: Session, args: argparse.Namespace) -> int:
    service.delete_user(db, args.user_id)
    print(f"Deleted user {args.user_id}")
    return 0

COMMANDS = {
    "create-user": cmd_create_user,
    "delete-user": cmd_delete_user,
}

def main(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    logging.basicConfig(level=logging.INFO)

    args = build_parser().parse_args(argv)
    settings = settings or Settings.from_env()

    engine = create_db_engine(settings.database_url)
    Base.metadata.create_all(bind=engine)

    try:
        with create_session_factory(engine)() as db:
            return COMMANDS[args.cmd](db, args)
    except JanmitraError as e:
        print(f"Error ({e.code}): {e.detail}", file=sys.stderr)
        return 1
    finally:
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
