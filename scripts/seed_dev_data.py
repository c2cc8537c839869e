"""Seed dev cases and notes from scripts/seed-data.json into Postgres.

Each entry under "cases" is created for the given user id through
CaseService, so the same validation and sanitization apply as over HTTP.
Entries under "notes" become case-section notes on the case with the
matching ``caseNo``. Cases whose number already exists are skipped.

Usage:
    uv run python -m scripts.seed_dev_data <user_id> [path/to/seed-data.json]

Requires: DATABASE_URL (Postgres) with migrations applied.
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from app.application.dtos.case import CaseCreate
from app.application.services.upload_policy import UploadPolicy
from app.application.use_cases.cases import CaseAttachmentService, CaseService
from app.domain.exceptions import CaseFileException, CaseNumberConflictException
from app.infrastructure.external.storage.factory import StorageFactory
from app.infrastructure.persistence.repositories import CaseRepository, NoteRepository
from app.schemas.case import CaseCreateRequest


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def _load_env() -> None:
    """Load .env from project root so get_settings() sees DATABASE_URL when run as script."""
    load_dotenv(_project_root() / ".env", override=True)


async def run(user_id: str, path: Path) -> None:
    _load_env()
    if not path.exists():
        print(f"Seed file not found: {path}", file=sys.stderr)
        sys.exit(1)
    with path.open() as f:
        data = json.load(f)

    from app.infrastructure.persistence import database as db_mod

    db_mod._ensure_engine()
    if db_mod.AsyncSessionLocal is None:
        print(
            "AsyncSessionLocal not configured. Set DATABASE_URL and run: uv run alembic upgrade head",
            file=sys.stderr,
        )
        sys.exit(1)

    storage = StorageFactory.create_storage_service()
    created: dict[str, str] = {}
    async with db_mod.AsyncSessionLocal() as session:
        async with session.begin():
            case_repo = CaseRepository(session)
            note_repo = NoteRepository(session)
            cases = CaseService(case_repo, note_repo, storage)
            attachments = CaseAttachmentService(
                case_repo, note_repo, storage, UploadPolicy()
            )

            for raw in data.get("cases", []):
                dto: CaseCreate = CaseCreateRequest.model_validate(raw).to_dto()
                try:
                    case = await cases.create_case(owner_id=user_id, data=dto)
                except CaseNumberConflictException:
                    print(f"  Case {dto.case_no} already exists, skip")
                    continue
                created[case.case_no] = case.id
                print(f"  Case {case.case_no} -> {case.id}")

            for raw in data.get("notes", []):
                case_id = created.get(raw["caseNo"])
                if case_id is None:
                    continue
                try:
                    await attachments.create_note(
                        owner_id=user_id,
                        case_id=case_id,
                        section=raw["sectionType"],
                        title=raw["title"],
                        content=raw.get("content", ""),
                    )
                except CaseFileException as e:
                    print(f"  Skip note {raw['title']!r} on {raw['caseNo']}: {e}", file=sys.stderr)
                    continue
                print(f"  Note {raw['title']!r} on {raw['caseNo']}")

    print("Seed completed.")


def main() -> None:
    if len(sys.argv) < 2:
        print(
            "Usage: uv run python -m scripts.seed_dev_data <user_id> [path/to/seed-data.json]",
            file=sys.stderr,
        )
        sys.exit(1)
    root = _project_root()
    user_id = sys.argv[1]
    path_arg = sys.argv[2] if len(sys.argv) > 2 else None
    path = Path(path_arg) if path_arg else root / "scripts" / "seed-data.json"
    if not path.is_absolute():
        path = (root / path).resolve()
    asyncio.run(run(user_id, path))


if __name__ == "__main__":
    main()
