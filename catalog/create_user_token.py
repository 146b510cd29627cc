# create_user_token.py
import os
from catalog.core.config import AUTO_CREATE_SCHEMA
from catalog.core.database import SessionLocal, engine
from catalog.core.security import create_jwt_token
from catalog.models import Base, User


def main():
    email = os.environ.get("USER_EMAIL", "demo@example.com")
    username = os.environ.get("USER_NAME", "demo")
    if AUTO_CREATE_SCHEMA:
        Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == email).first()
        if user is None:
            user = User(email=email, username=username)
            db.add(user)
            db.commit()
            db.refresh(user)
        token = create_jwt_token({"sub": str(user.id)})
        print("USER_ID:", user.id)
        print("USERNAME:", user.username)
        print("ACCESS_TOKEN:", token)
        print("Pass it as 'Authorization: Bearer <token>' or ?token=<token> on /ws/discussions.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
