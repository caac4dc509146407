"""
Lifecycle hooks that keep the owner back-references in step with the
configuration records.

A subject points at its policy and a course at its system through a plain
scalar column. Creating the configuration record and writing the pointer are
two separate commits; when the second one fails the first is undone by a
compensating delete. Whatever still slips through (a crash between the two
commits, a failed compensation) is repaired by ``sweep``.
"""

import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field, fields

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from evalservice.core.config import settings
from evalservice.core.errors import (
    NotFoundError,
    PolicyExistsError,
    PolicyViolationError,
    SystemExistsError,
)
from evalservice.models.owner import Course, Subject
from evalservice.models.policy import EvaluationPolicy
from evalservice.models.system import EvaluationSystem
from evalservice.schemas.policy import PolicyRuleBase
from evalservice.schemas.system import EvaluationGroupCreate
from evalservice.services.policy_check import check_groups
from evalservice.services.policy_service import policy_service
from evalservice.services.system_service import system_service

logger = logging.getLogger(__name__)


@dataclass
class SweepReport:
    relinked_subjects: list[uuid.UUID] = field(default_factory=list)
    deleted_policies: list[uuid.UUID] = field(default_factory=list)
    cleared_subjects: list[uuid.UUID] = field(default_factory=list)
    relinked_courses: list[uuid.UUID] = field(default_factory=list)
    deleted_systems: list[uuid.UUID] = field(default_factory=list)
    cleared_courses: list[uuid.UUID] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(len(getattr(self, f.name)) for f in fields(self))


def _require_subject(db: Session, subject_id: uuid.UUID) -> Subject:
    subject = db.get(Subject, subject_id)
    if not subject:
        raise NotFoundError("Subject not found")
    return subject


def _require_course(db: Session, course_id: uuid.UUID) -> Course:
    course = db.get(Course, course_id)
    if not course:
        raise NotFoundError("Course not found")
    return course


class BackrefService:
    # --- subject -> policy -------------------------------------------------

    def _link_subject(self, db: Session, subject: Subject, policy_id: uuid.UUID | None) -> None:
        subject.evaluation_policy_id = policy_id
        db.add(subject)
        db.commit()

    def get_subject_policy(self, db: Session, subject_id: uuid.UUID) -> EvaluationPolicy:
        subject = _require_subject(db, subject_id)
        if subject.evaluation_policy_id is None:
            raise NotFoundError("Subject has no evaluation policy")
        return policy_service.get(db, subject.evaluation_policy_id)

    def attach_policy(
        self, db: Session, subject_id: uuid.UUID, rules: Sequence[PolicyRuleBase]
    ) -> EvaluationPolicy:
        subject = _require_subject(db, subject_id)
        if subject.evaluation_policy_id is not None:
            raise PolicyExistsError(subject_id=subject_id)

        policy = policy_service.create(db, subject.id, rules)
        policy_id = policy.id
        try:
            self._link_subject(db, subject, policy_id)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Linking policy %s to subject %s failed", policy_id, subject_id)
            self._discard_policy(db, policy_id)
            raise
        return policy

    def _discard_policy(self, db: Session, policy_id: uuid.UUID) -> None:
        try:
            policy_service.delete(db, policy_id)
        except (SQLAlchemyError, NotFoundError):
            db.rollback()
            logger.error("Could not discard orphan policy %s, left for the sweep", policy_id)

    def replace_policy(
        self, db: Session, subject_id: uuid.UUID, rules: Sequence[PolicyRuleBase]
    ) -> EvaluationPolicy:
        subject = _require_subject(db, subject_id)
        if subject.evaluation_policy_id is None:
            raise NotFoundError("Subject has no evaluation policy")
        return policy_service.update(db, subject.evaluation_policy_id, rules, subject_id=subject.id)

    def detach_policy(self, db: Session, subject_id: uuid.UUID) -> None:
        subject = _require_subject(db, subject_id)
        policy_id = subject.evaluation_policy_id
        if policy_id is None:
            raise NotFoundError("Subject has no evaluation policy")

        # Policy first: a failure after this leaves a dangling pointer, which
        # the sweep clears, rather than an orphan it would relink.
        try:
            policy_service.delete(db, policy_id)
        except NotFoundError:
            logger.warning("Subject %s pointed at missing policy %s", subject_id, policy_id)
        self._link_subject(db, subject, None)

    # --- course -> system --------------------------------------------------

    def _link_course(self, db: Session, course: Course, system_id: uuid.UUID | None) -> None:
        course.evaluation_system_id = system_id
        db.add(course)
        db.commit()

    def _validate_groups(
        self, db: Session, course: Course, groups: Sequence[EvaluationGroupCreate]
    ) -> bool:
        policy = policy_service.find_by_subject(db, course.subject_id)
        violations = check_groups(policy, groups)
        if violations:
            logger.info(
                "Course %s groups break the policy of subject %s: %s",
                course.id,
                course.subject_id,
                violations,
            )
            if settings.ENFORCE_POLICY_BOUNDS:
                raise PolicyViolationError(violations)
        return not violations

    def get_course_system(self, db: Session, course_id: uuid.UUID) -> EvaluationSystem:
        course = _require_course(db, course_id)
        if course.evaluation_system_id is None:
            raise NotFoundError("Course has no evaluation system")
        return system_service.get(db, course.evaluation_system_id)

    def attach_system(
        self,
        db: Session,
        course_id: uuid.UUID,
        groups: Sequence[EvaluationGroupCreate],
        academic_year_id: uuid.UUID | None = None,
    ) -> EvaluationSystem:
        course = _require_course(db, course_id)
        if course.evaluation_system_id is not None:
            raise SystemExistsError(course_id=course_id)

        validated = self._validate_groups(db, course, groups)
        system = system_service.create(
            db,
            course.id,
            groups,
            academic_year_id=academic_year_id or course.academic_year_id,
            validated=validated,
        )
        system_id = system.id
        try:
            self._link_course(db, course, system_id)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Linking system %s to course %s failed", system_id, course_id)
            self._discard_system(db, system_id)
            raise
        return system

    def _discard_system(self, db: Session, system_id: uuid.UUID) -> None:
        try:
            system_service.delete(db, system_id)
        except (SQLAlchemyError, NotFoundError):
            db.rollback()
            logger.error("Could not discard orphan system %s, left for the sweep", system_id)

    def replace_system(
        self,
        db: Session,
        course_id: uuid.UUID,
        groups: Sequence[EvaluationGroupCreate],
        academic_year_id: uuid.UUID | None = None,
    ) -> EvaluationSystem:
        course = _require_course(db, course_id)
        if course.evaluation_system_id is None:
            raise NotFoundError("Course has no evaluation system")

        validated = self._validate_groups(db, course, groups)
        return system_service.update(
            db,
            course.evaluation_system_id,
            groups,
            course_id=course.id,
            academic_year_id=academic_year_id,
            validated=validated,
        )

    def detach_system(self, db: Session, course_id: uuid.UUID) -> None:
        course = _require_course(db, course_id)
        system_id = course.evaluation_system_id
        if system_id is None:
            raise NotFoundError("Course has no evaluation system")

        try:
            system_service.delete(db, system_id)
        except NotFoundError:
            logger.warning("Course %s pointed at missing system %s", course_id, system_id)
        self._link_course(db, course, None)

    # --- repair --------------------------------------------------------------

    def sweep(self, db: Session, dry_run: bool = False) -> SweepReport:
        """
        Repair the links left inconsistent by interrupted two-step writes.

        - a policy/system whose owner is gone is deleted
        - an owner that exists but does not point at its policy/system is relinked
        - an owner pointing at a record that is gone or belongs to another
          owner is cleared

        With ``dry_run`` the report is computed but nothing is written.
        """
        report = SweepReport()

        for policy in db.query(EvaluationPolicy).all():
            subject = db.get(Subject, policy.subject_id)
            if subject is None:
                report.deleted_policies.append(policy.id)
                if not dry_run:
                    db.delete(policy)
            elif subject.evaluation_policy_id != policy.id:
                report.relinked_subjects.append(subject.id)
                if not dry_run:
                    subject.evaluation_policy_id = policy.id

        relinked = set(report.relinked_subjects)
        for subject in db.query(Subject).filter(Subject.evaluation_policy_id.is_not(None)).all():
            if subject.id in relinked:
                continue
            policy = db.get(EvaluationPolicy, subject.evaluation_policy_id)
            if policy is None or policy.subject_id != subject.id:
                report.cleared_subjects.append(subject.id)
                if not dry_run:
                    subject.evaluation_policy_id = None

        for system in db.query(EvaluationSystem).all():
            course = db.get(Course, system.course_id)
            if course is None:
                report.deleted_systems.append(system.id)
                if not dry_run:
                    db.delete(system)
            elif course.evaluation_system_id != system.id:
                report.relinked_courses.append(course.id)
                if not dry_run:
                    course.evaluation_system_id = system.id

        relinked = set(report.relinked_courses)
        for course in db.query(Course).filter(Course.evaluation_system_id.is_not(None)).all():
            if course.id in relinked:
                continue
            system = db.get(EvaluationSystem, course.evaluation_system_id)
            if system is None or system.course_id != course.id:
                report.cleared_courses.append(course.id)
                if not dry_run:
                    course.evaluation_system_id = None

        if dry_run:
            db.rollback()
        else:
            db.commit()

        logger.info("Back-reference sweep (dry_run=%s) found %d issues", dry_run, report.total)
        return report


# Singleton instance
backref_service = BackrefService()
