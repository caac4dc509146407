import logging
import uuid
from collections.abc import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from evalservice.core.errors import EvalServiceError, NotFoundError, SystemExistsError
from evalservice.models.system import EvaluationGroup, EvaluationSystem
from evalservice.schemas.system import EvaluationGroupCreate

logger = logging.getLogger(__name__)


def _build_groups(groups: Sequence[EvaluationGroupCreate]) -> list[EvaluationGroup]:
    return [
        EvaluationGroup(
            position=position,
            evaluation_type_id=group.evaluation_type_id,
            total_weight=group.total_weight,
        )
        for position, group in enumerate(groups)
    ]


class SystemService:
    """Store for evaluation systems, one per course.

    Only field-level checks happen here. Whether the weights add up to 100 and
    respect the subject policy is decided by the caller (see policy_check).
    """

    def _query(self, db: Session):
        return db.query(EvaluationSystem).options(selectinload(EvaluationSystem.evaluation_groups))

    def find_by_course(self, db: Session, course_id: uuid.UUID) -> EvaluationSystem | None:
        return self._query(db).filter(EvaluationSystem.course_id == course_id).first()

    def get(self, db: Session, system_id: uuid.UUID) -> EvaluationSystem:
        system = self._query(db).filter(EvaluationSystem.id == system_id).first()
        if not system:
            raise NotFoundError("Evaluation system not found")
        return system

    def get_by_course(self, db: Session, course_id: uuid.UUID) -> EvaluationSystem:
        system = self.find_by_course(db, course_id)
        if not system:
            raise NotFoundError("Evaluation system not found")
        return system

    def create(
        self,
        db: Session,
        course_id: uuid.UUID,
        groups: Sequence[EvaluationGroupCreate],
        *,
        academic_year_id: uuid.UUID | None = None,
        active: bool = False,
        validated: bool = False,
    ) -> EvaluationSystem:
        if self.find_by_course(db, course_id):
            raise SystemExistsError(course_id=course_id)

        system = EvaluationSystem(
            course_id=course_id,
            academic_year_id=academic_year_id,
            active=active,
            validated=validated,
            evaluation_groups=_build_groups(groups),
        )
        db.add(system)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise SystemExistsError(course_id=course_id) from exc

        logger.info("Created evaluation system %s for course %s", system.id, course_id)
        return self.get(db, system.id)

    def update(
        self,
        db: Session,
        system_id: uuid.UUID,
        groups: Sequence[EvaluationGroupCreate],
        *,
        course_id: uuid.UUID | None = None,
        academic_year_id: uuid.UUID | None = None,
        active: bool | None = None,
        validated: bool = False,
    ) -> EvaluationSystem:
        system = self.get(db, system_id)
        if course_id is not None and course_id != system.course_id:
            raise EvalServiceError("courseId of an evaluation system cannot change")

        system.evaluation_groups = _build_groups(groups)
        if academic_year_id is not None:
            system.academic_year_id = academic_year_id
        if active is not None:
            system.active = active
        # Only the policy check may mark new groups as valid
        system.validated = validated

        db.add(system)
        db.commit()

        logger.info("Replaced groups of evaluation system %s (%d groups)", system_id, len(groups))
        return self.get(db, system_id)

    def delete(self, db: Session, system_id: uuid.UUID) -> None:
        system = self.get(db, system_id)
        db.delete(system)
        db.commit()
        logger.info("Deleted evaluation system %s", system_id)


# Singleton instance
system_service = SystemService()
