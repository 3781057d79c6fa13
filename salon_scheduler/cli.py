"""
Administrative commands for provisioning a Salon Scheduler deployment.

Staff accounts are created here rather than through the HTTP API so that no
network route can mint credentials.

    salon-scheduler init-db
    salon-scheduler create-user --name "Ariela" --email ariela@example.com --role employee
"""
import argparse
import getpass
import logging
import sys
from typing import List, Optional

from .core.database import SessionLocal, init_db
from .core.errors import SchedulingError
from .core.security import UserRole
from .services.auth_service import AuthService

logger = logging.getLogger(__name__)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="salon-scheduler", description=__doc__.strip().splitlines()[0])
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("init-db", help="Create database tables")

    create_user = commands.add_parser("create-user", help="Provision a staff account")
    create_user.add_argument("--name", required=True)
    create_user.add_argument("--email", required=True)
    create_user.add_argument("--role", choices=[role.value for role in UserRole], default=UserRole.EMPLOYEE.value)
    create_user.add_argument("--password", help="Prompted for when omitted")

    commands.add_parser("serve", help="Run the API server")
    return parser

def create_user(name: str, email: str, role: str, password: Optional[str]) -> int:
    if password is None:
        password = getpass.getpass("Password: ")
        if password != getpass.getpass("Repeat password: "):
            print("Passwords do not match", file=sys.stderr)
            return 1

    init_db()
    db = SessionLocal()
    try:
        user = AuthService(db).create_user(name, email, password, UserRole(role))
    except SchedulingError as e:
        print(f"Could not create user: {e.detail}", file=sys.stderr)
        return 1
    finally:
        db.close()

    print(f"Created {user.role.value} {user.email} (id={user.id})")
    return 0

def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO)
    args = build_parser().parse_args(argv)

    if args.command == "init-db":
        init_db()
        print("Database initialized")
        return 0
    if args.command == "create-user":
        return create_user(args.name, args.email, args.role, args.password)
    if args.command == "serve":
        from .main import run
        run()
    return 0

if __name__ == "__main__":
    sys.exit(main())
