"""
Promote a user to admin by email (admins may trigger ingestion and run the scheduler).
Usage: python -m jobtrack.scripts.promote_admin user@example.com
"""
import sys

from jobtrack.database import SessionLocal, ensure_tables_exist
from jobtrack.repos.user_repo import get_by_email, update


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print("Usage: python -m jobtrack.scripts.promote_admin <email>")
        return 1
    email = argv[0].strip()
    ensure_tables_exist()
    db = SessionLocal()
    try:
        user = get_by_email(db, email)
        if not user:
            print(f"User not found: {email}")
            return 1
        update(db, user.id, is_admin=True)
        print(f"Promoted {email} to admin.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
