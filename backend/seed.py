import logging
import sys
import uuid

# Add current directory to sys.path to resolve 'evalservice' modules
sys.path.append(".")

from evalservice.core.db import SessionLocal
from evalservice.models.owner import Course, Subject
from evalservice.schemas.item import EvaluationItemPayload
from evalservice.schemas.policy import PolicyRuleCreate
from evalservice.schemas.system import EvaluationGroupCreate
from evalservice.services.backref_service import backref_service
from evalservice.services.item_service import item_service

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Stable ids so reseeding finds the same records
THEORY_TYPE_ID = uuid.UUID("00000000-0000-0000-0000-00000000e001")
PRACTICE_TYPE_ID = uuid.UUID("00000000-0000-0000-0000-00000000e002")
DEMO_GROUP_ID = uuid.UUID("00000000-0000-0000-0000-00000000a001")

DEMO_ITEMS = [
    ("Midterm", THEORY_TYPE_ID, 40, None),
    ("Final exam", THEORY_TYPE_ID, 60, 4),
    ("Lab 1", PRACTICE_TYPE_ID, 50, None),
    ("Lab 2", PRACTICE_TYPE_ID, 50, None),
]


def seed_db():
    db = SessionLocal()
    try:
        logger.info("Seeding database...")

        # 1. Subject with its policy
        subject = db.query(Subject).filter_by(code="ALG").first()
        if not subject:
            subject = Subject(id=uuid.uuid4(), name="Linear Algebra", code="ALG")
            db.add(subject)
            db.commit()
            logger.info("Created Subject: ALG")

        if subject.evaluation_policy_id is None:
            backref_service.attach_policy(
                db,
                subject.id,
                [
                    PolicyRuleCreate(
                        evaluation_type_id=THEORY_TYPE_ID, min_percentage=50, max_percentage=70
                    ),
                    PolicyRuleCreate(
                        evaluation_type_id=PRACTICE_TYPE_ID, min_percentage=30, max_percentage=50
                    ),
                ],
            )
            logger.info("Created Evaluation Policy for ALG")

        # 2. Course with its system
        course = db.query(Course).filter_by(code="ALG-2025").first()
        if not course:
            course = Course(id=uuid.uuid4(), name="Linear Algebra 2025", code="ALG-2025", subject_id=subject.id)
            db.add(course)
            db.commit()
            logger.info("Created Course: ALG-2025")

        if course.evaluation_system_id is None:
            backref_service.attach_system(
                db,
                course.id,
                [
                    EvaluationGroupCreate(evaluation_type_id=THEORY_TYPE_ID, total_weight=60),
                    EvaluationGroupCreate(evaluation_type_id=PRACTICE_TYPE_ID, total_weight=40),
                ],
            )
            logger.info("Created Evaluation System for ALG-2025")

        # 3. Items of the demo group, only when the group is still empty
        if not item_service.list_by_group(db, DEMO_GROUP_ID):
            result = item_service.sync(
                db,
                DEMO_GROUP_ID,
                [
                    EvaluationItemPayload(
                        evaluation_system_id=course.evaluation_system_id,
                        evaluation_type_id=type_id,
                        name=name,
                        weight=weight,
                        min_grade=min_grade,
                    )
                    for name, type_id, weight, min_grade in DEMO_ITEMS
                ],
            )
            logger.info(f"Created {result.created_count} Evaluation Items")

        logger.info("Seeding complete!")
        logger.info(f"Subject ID: {subject.id}")
        logger.info(f"Course ID: {course.id}")
        logger.info(f"Group ID: {DEMO_GROUP_ID}")

    except Exception as e:
        logger.error(f"Seeding failed: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_db()
