#!/usr/bin/env python3
"""
Seed script to create journal accounts.

Usage:
    # One account per line: email,password[,full name]
    export DAYBOOK_SEED_USERS="me@example.com,correct-horse-battery,Me"

    python scripts/seed_users.py
"""
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from app.database import SessionLocal, init_db
from app.models import User
from app.auth import hash_password
from app.services.validators import validate_signup


def parse_seed_users(raw: str):
    """Yield (email, password, full_name) tuples from DAYBOOK_SEED_USERS."""
    for line in raw.splitlines():
        line = line.strip()
        if not line:
            continue
        parts = [p.strip() for p in line.split(",", 2)]
        if len(parts) < 2:
            raise ValueError(f"Expected 'email,password[,name]', got {line!r}")
        yield parts[0], parts[1], parts[2] if len(parts) > 2 else None


def seed_users():
    """Create user accounts from the environment."""
    raw = os.getenv("DAYBOOK_SEED_USERS", "")
    if not raw.strip():
        print("DAYBOOK_SEED_USERS is not set; nothing to do")
        sys.exit(1)

    init_db()
    db = SessionLocal()
    created = []
    skipped = []
    errors = []

    try:
        for email, password, full_name in parse_seed_users(raw):
            try:
                email = validate_signup(email, password)
            except ValueError as e:
                errors.append(f"{email} - {e}")
                continue

            if db.query(User).filter(User.email == email).first():
                skipped.append(f"{email} - already exists")
                continue

            db.add(User(
                email=email,
                full_name=full_name,
                password_hash=hash_password(password),
                is_active=True,
            ))
            created.append(email)

        db.commit()

    except Exception as e:
        db.rollback()
        print(f"Error: {e}")
        sys.exit(1)
    finally:
        db.close()

    print("\n=== User Seed Summary ===\n")

    for item in created:
        print(f"  + {item}")
    for item in skipped:
        print(f"  - {item}")
    for item in errors:
        print(f"  ! {item}")

    print(f"\nTotal: {len(created)} created, {len(skipped)} skipped, {len(errors)} errors")

    if errors:
        sys.exit(1)


if __name__ == "__main__":
    seed_users()
