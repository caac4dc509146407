import json
import sys
from pathlib import Path


def main() -> int:
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.append(str(repo_root / "backend"))

    from evalservice.schemas.item import EvaluationItemSync  # noqa: WPS433
    from evalservice.schemas.policy import EvaluationPolicyCreate, EvaluationPolicyUpdate
    from evalservice.schemas.system import EvaluationSystemCreate, EvaluationSystemUpdate

    schemas = {
        "evaluation_policy_create.schema.json": EvaluationPolicyCreate,
        "evaluation_policy_update.schema.json": EvaluationPolicyUpdate,
        "evaluation_system_create.schema.json": EvaluationSystemCreate,
        "evaluation_system_update.schema.json": EvaluationSystemUpdate,
        "evaluation_items_sync.schema.json": EvaluationItemSync,
    }

    out_dir = repo_root / "docs" / "schemas"
    out_dir.mkdir(parents=True, exist_ok=True)

    for filename, model in schemas.items():
        schema = model.model_json_schema(by_alias=True)
        path = out_dir / filename
        path.write_text(json.dumps(schema, indent=2, sort_keys=True), encoding="utf-8")

    print(f"Wrote {len(schemas)} schemas to {out_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
