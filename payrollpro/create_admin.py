# payrollpro/create_admin.py
"""
Create (or promote) an administrator account.

    python -m payrollpro.create_admin admin@example.com "Alice Admin" adminpass
"""
import sys

from werkzeug.security import generate_password_hash

from payrollpro.database import SessionLocal, init_db
from payrollpro.profiles.models import Profile, UserRole


def create_admin(email: str, full_name: str, password: str) -> Profile:
    init_db()
    db = SessionLocal()
    try:
        email = email.strip().lower()
        profile = db.query(Profile).filter(Profile.email == email).first()
        if profile is None:
            profile = Profile(full_name=full_name, email=email)
            db.add(profile)
        profile.password_hash = generate_password_hash(password)
        if not any(r.role == "admin" for r in profile.roles):
            profile.roles.append(UserRole(role="admin"))
        db.commit()
        db.refresh(profile)
        return profile
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) != 4:
        print(__doc__)
        sys.exit(1)
    p = create_admin(*sys.argv[1:4])
    print("Admin ready:", p.email)
