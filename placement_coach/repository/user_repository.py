import logging
from typing import Optional

from sqlalchemy.orm import Session

import placement_coach.databases.postgres.model as models

def find_user_by_email(db: Session, email: str) -> Optional[models.User]:
    result = db.query(models.User).filter(models.User.email == email).first()
    logging.info(f"Result query: {result}")
    return result

def create_user(db: Session, email: str, name: Optional[str] = None, role: str = "student") -> models.User:
    user = models.User(email=email, name=name, role=role)
    db.add(user)
    db.flush()
    return user
