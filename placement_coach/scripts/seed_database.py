import logging
import sys

from sqlalchemy.orm import Session

import placement_coach.databases.postgres.model as models
from placement_coach.databases.postgres.database import engine, sessionLocal
from placement_coach.repository import test_repository, user_repository

# Configure logging to show INFO level logs to stdout
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)

SAMPLE_USERS = [
    {"email": "student@example.com", "name": "Sample Student", "role": "student"},
    {"email": "admin@example.com", "name": "Sample Admin", "role": "admin"},
]

# (text, category or None, options, index of the correct option)
TCS_FOUNDATION = [
    ("A shopkeeper buys an article for Rs. 200 and sells it for Rs. 250. Find the profit percentage.",
     "Quantitative Aptitude", ["20%", "25%", "30%", "50%"], 1),
    ("A train 150 m long passes a pole in 15 seconds. What is the speed of the train in km/h?",
     "Quantitative Aptitude", ["36", "40", "45", "54"], 0),
    ("If all roses are flowers and some flowers fade quickly, which conclusion follows?",
     "Logical Reasoning", ["All roses fade quickly", "Some roses fade quickly", "No conclusion follows", "No flower is a rose"], 2),
    ("Find the next number in the series: 2, 6, 12, 20, 30, ?",
     None, ["40", "42", "44", "46"], 1),
    ("Choose the synonym of the word ABUNDANT.",
     "Verbal & Reading", ["Scarce", "Plentiful", "Rare", "Meagre"], 1),
    ("Pointing to a man, Riya said, 'He is the son of my grandfather's only son.' How is the man related to Riya?",
     None, ["Brother", "Cousin", "Uncle", "Father"], 0),
    ("The table shows sales of 5 products. Which product has the highest share in the pie chart of total revenue?",
     "Data Interpretation", ["Product A", "Product B", "Product C", "Product D"], 2),
    ("What is the output of printf(\"%d\", 5 / 2) in C?",
     None, ["2", "2.5", "3", "Compilation error"], 0),
]

TCS_ADVANCED = [
    ("The ratio of the ages of A and B is 3:5. After 6 years the ratio becomes 3:4. Find the present age of B.",
     "Quantitative Aptitude", ["10", "12", "15", "18"], 0),
    ("Six people sit around a circular table. In how many arrangements can they be seated?",
     None, ["60", "120", "360", "720"], 1),
    ("Which data structure uses LIFO order?",
     "Programming/Coding", ["Queue", "Stack", "Array", "Linked List"], 1),
    ("Read the passage and identify the main idea the author wants to convey about renewable energy.",
     "Verbal & Reading", ["Cost", "Sustainability", "Politics", "History"], 1),
]

WIPRO_APTITUDE = [
    ("A pipe fills a tank in 6 hours and another empties it in 12 hours. How long to fill the tank with both open?",
     "Quantitative Aptitude", ["8", "10", "12", "14"], 2),
    ("Statement: Some cats are dogs. All dogs are birds. Conclusion: Some cats are birds.",
     "Logical Reasoning", ["True", "False", "Uncertain", "Cannot say"], 0),
    ("Choose the antonym of the word OBSCURE.",
     None, ["Vague", "Clear", "Hidden", "Dim"], 1),
    ("What is the average of 10, 20, 30, 40 and 50?",
     None, ["25", "30", "35", "40"], 1),
]

SAMPLE_TESTS = [
    {"title": "TCS Foundation Assessment", "company": "TCS", "topic": "Foundation", "duration": 75, "questions": TCS_FOUNDATION},
    {"title": "TCS Advanced Assessment", "company": "TCS", "topic": "Advanced", "duration": 115, "questions": TCS_ADVANCED},
    {"title": "Wipro Aptitude Assessment", "company": "Wipro", "topic": "Aptitude", "duration": 48, "questions": WIPRO_APTITUDE},
]

def seed_users(db: Session) -> int:
    created = 0
    for user in SAMPLE_USERS:
        if user_repository.find_user_by_email(db, user["email"]):
            continue
        user_repository.create_user(db, **user)
        created += 1
    return created

def seed_tests(db: Session) -> int:
    created = 0
    for sample in SAMPLE_TESTS:
        if test_repository.find_test(db, sample["title"], "company", sample["company"]):
            logging.info(f"Test already present: {sample['title']}")
            continue

        test = test_repository.create_test(
            db,
            title=sample["title"],
            test_type="company",
            company=sample["company"],
            duration=sample["duration"],
            description=f"{sample['company']} {sample['topic']} placement round",
            topic=sample["topic"],
        )
        for position, (text, category, options, answer) in enumerate(sample["questions"]):
            db.add(models.Question(
                test_id=test.id,
                text=text,
                category=category,
                position=position,
                options=[
                    models.Option(text=option, is_correct=(idx == answer), position=idx)
                    for idx, option in enumerate(options)
                ],
            ))
        created += 1
    return created

def seed(db: Session) -> None:
    users = seed_users(db)
    tests = seed_tests(db)
    db.commit()
    logging.info(f"Seeded {users} users and {tests} tests")

def main():
    logging.info("Starting database seed script")
    models.Base.metadata.create_all(bind=engine)
    db: Session = sessionLocal()
    try:
        seed(db)
        logging.info("Seed completed successfully")
    finally:
        db.close()
        logging.info("DB session closed")

if __name__ == "__main__":
    main()
