import logging
import sys
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

import placement_coach.databases.postgres.model as models
from placement_coach.databases.postgres.database import sessionLocal
from placement_coach.services.categorizer import categorize_question

# Configure logging to show INFO level logs to stdout
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)

SAMPLE_SIZE = 5

def check_categories(db: Session, limit: int = SAMPLE_SIZE) -> Optional[List[Tuple[str, Optional[str], str]]]:
    """
    (text, stored category, inferred category) for the first questions of the
    newest TCS Foundation test, or None when there is no such test
    """
    test = (
        db.query(models.Test)
        .filter(models.Test.company == "TCS", models.Test.title.contains("Foundation"))
        .order_by(models.Test.created_at.desc())
        .first()
    )
    if not test:
        return None

    questions = (
        db.query(models.Question)
        .filter(models.Question.test_id == test.id)
        .order_by(models.Question.position)
        .limit(limit)
        .all()
    )
    logging.info(f"Test: {test.title}, sampled {len(questions)} questions")
    return [(q.text, q.category, categorize_question(q.text)) for q in questions]

def main():
    db: Session = sessionLocal()
    try:
        rows = check_categories(db)
        if rows is None:
            print("TCS Foundation test not found")
            return

        print(f"\nFirst {len(rows)} Questions:")
        for idx, (text, stored, inferred) in enumerate(rows, 1):
            print(f'{idx}. Category: "{stored or "NULL"}" (inferred: "{inferred}") - Text: {text[:50]}...')
    finally:
        db.close()

if __name__ == "__main__":
    main()
