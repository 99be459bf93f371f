"""CLI tool for admin operations.

Usage:
    python -m journal.cli create-user
    python -m journal.cli serve [host] [port]
"""

import sys
import getpass

from sqlmodel import Session

from journal.database import engine, create_db_and_tables
from journal.services.accounts import DuplicateEmailError, create_account


def create_user():
    """Create a user together with a fresh organization."""
    create_db_and_tables()

    email = input("Email: ").strip()
    if not email or "@" not in email:
        print("A valid email is required.")
        sys.exit(1)

    first_name = input("First name: ").strip()
    last_name = input("Last name: ").strip()
    if not first_name or not last_name:
        print("First and last name cannot be empty.")
        sys.exit(1)
    organization = input("Organization name (optional): ").strip() or None

    password = getpass.getpass("Password: ")
    password_confirm = getpass.getpass("Confirm password: ")
    if password != password_confirm:
        print("Passwords do not match.")
        sys.exit(1)
    if len(password) < 8:
        print("Password must be at least 8 characters.")
        sys.exit(1)

    with Session(engine) as session:
        try:
            user = create_account(
                session,
                email=email,
                password=password,
                first_name=first_name,
                last_name=last_name,
                organization_name=organization,
            )
        except DuplicateEmailError:
            print(f"User '{email}' already exists.")
            sys.exit(1)

        print(f"\nUser '{user.email}' created in organization {user.organization_id}.")


def serve(host: str = "127.0.0.1", port: str = "8000"):
    import uvicorn

    uvicorn.run("journal.main:app", host=host, port=int(port))


def main():
    if len(sys.argv) < 2:
        print("Usage: python -m journal.cli <command>")
        print("Commands: create-user, serve")
        sys.exit(1)

    command = sys.argv[1]
    if command == "create-user":
        create_user()
    elif command == "serve":
        serve(*sys.argv[2:4])
    else:
        print(f"Unknown command: {command}")
        sys.exit(1)


if __name__ == "__main__":
    main()
