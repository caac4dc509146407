import logging
import uuid
from collections.abc import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from evalservice.core.errors import EvalServiceError, NotFoundError, PolicyExistsError
from evalservice.models.policy import EvaluationPolicy, PolicyRule
from evalservice.schemas.policy import PolicyRuleBase

logger = logging.getLogger(__name__)


def _build_rules(rules: Sequence[PolicyRuleBase]) -> list[PolicyRule]:
    return [
        PolicyRule(
            position=position,
            evaluation_type_id=rule.evaluation_type_id,
            min_percentage=rule.min_percentage,
            max_percentage=rule.max_percentage,
        )
        for position, rule in enumerate(rules)
    ]


class PolicyService:
    """Store for evaluation policies, one per subject."""

    def _query(self, db: Session):
        return db.query(EvaluationPolicy).options(selectinload(EvaluationPolicy.policy_rules))

    def find_by_subject(self, db: Session, subject_id: uuid.UUID) -> EvaluationPolicy | None:
        return self._query(db).filter(EvaluationPolicy.subject_id == subject_id).first()

    def get(self, db: Session, policy_id: uuid.UUID) -> EvaluationPolicy:
        policy = self._query(db).filter(EvaluationPolicy.id == policy_id).first()
        if not policy:
            raise NotFoundError("Evaluation policy not found")
        return policy

    def get_by_subject(self, db: Session, subject_id: uuid.UUID) -> EvaluationPolicy:
        policy = self.find_by_subject(db, subject_id)
        if not policy:
            raise NotFoundError("Evaluation policy not found")
        return policy

    def create(
        self, db: Session, subject_id: uuid.UUID, rules: Sequence[PolicyRuleBase]
    ) -> EvaluationPolicy:
        if self.find_by_subject(db, subject_id):
            raise PolicyExistsError(subject_id=subject_id)

        policy = EvaluationPolicy(subject_id=subject_id, policy_rules=_build_rules(rules))
        db.add(policy)
        try:
            db.commit()
        except IntegrityError as exc:
            # Lost a race against a concurrent create for the same subject
            db.rollback()
            raise PolicyExistsError(subject_id=subject_id) from exc

        logger.info("Created evaluation policy %s for subject %s", policy.id, subject_id)
        return self.get(db, policy.id)

    def update(
        self,
        db: Session,
        policy_id: uuid.UUID,
        rules: Sequence[PolicyRuleBase],
        subject_id: uuid.UUID | None = None,
    ) -> EvaluationPolicy:
        """Replace the rule list of a policy wholesale.

        Systems already built against the previous bounds are not revisited.
        """
        policy = self.get(db, policy_id)
        if subject_id is not None and subject_id != policy.subject_id:
            raise EvalServiceError("subjectId of an evaluation policy cannot change")

        policy.policy_rules = _build_rules(rules)
        db.add(policy)
        db.commit()

        logger.info("Replaced rules of evaluation policy %s (%d rules)", policy_id, len(rules))
        return self.get(db, policy_id)

    def delete(self, db: Session, policy_id: uuid.UUID) -> None:
        policy = self.get(db, policy_id)
        db.delete(policy)
        db.commit()
        logger.info("Deleted evaluation policy %s", policy_id)


# Singleton instance
policy_service = PolicyService()
