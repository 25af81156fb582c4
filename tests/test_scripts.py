import placement_coach.databases.postgres.model as models
from placement_coach.scripts.check_categories import check_categories
from placement_coach.scripts.seed_database import SAMPLE_TESTS, seed


def test_seed_is_idempotent(db):
    seed(db)
    seed(db)

    assert db.query(models.Test).count() == len(SAMPLE_TESTS)
    assert db.query(models.User).count() == 2
    for question in db.query(models.Question).all():
        assert sum(1 for o in question.options if o.is_correct) == 1


def test_check_categories_compares_stored_and_inferred(seeded_db):
    rows = check_categories(seeded_db)

    assert len(rows) == 5
    text, stored, inferred = rows[0]
    assert text.startswith("A shopkeeper buys an article")
    assert stored == "Quantitative Aptitude"
    assert inferred == "Quantitative Aptitude"
    # Uncategorized questions still get an inferred category
    assert rows[3][1] is None
    assert rows[3][2]


def test_check_categories_without_test(db):
    assert check_categories(db) is None


def test_question_and_option_defaults(db):
    test = models.Test(title="Defaults", type="practice")
    db.add(test)
    db.flush()
    question = models.Question(test_id=test.id, text="2 + 2?", options=[models.Option(text="4")])
    db.add(question)
    db.commit()
    db.refresh(question)

    assert question.position == 0
    assert question.options[0].is_correct is False
    assert question.options[0].position == 0
    assert test.duration == 60
