"""JSON file persistence for scored transcripts."""

import logging
import tempfile
import uuid
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from kepler.schemas.scoring import ScoreResult, TranscriptRecord

logger = logging.getLogger(__name__)


class PersistenceService:
    """Stores one ``{transcript_id}.json`` per scoring run under ``results_dir``."""

    def __init__(self, results_dir: Path) -> None:
        self._results_dir = results_dir
        self._results_dir.mkdir(parents=True, exist_ok=True)

    def save_result(self, transcript: str, result: ScoreResult) -> TranscriptRecord:
        record = TranscriptRecord(
            id=uuid.uuid4().hex,
            transcript_text=transcript,
            overall_score=result.overall_score,
            word_count=result.word_count,
            scoring_data=result.criteria,
            created_at=datetime.now(timezone.utc),
        )
        dest = self._results_dir / f"{record.id}.json"
        self._atomic_write(dest, record.model_dump_json(indent=2))
        logger.info("Persisted transcript %s (score=%.2f)", record.id, record.overall_score)
        return record

    def load_result(self, transcript_id: str) -> TranscriptRecord | None:
        # ids are uuid hex; anything else cannot name a file we wrote
        if not transcript_id.isalnum():
            return None
        path = self._results_dir / f"{transcript_id}.json"
        if not path.exists():
            return None
        try:
            return TranscriptRecord.model_validate_json(path.read_text("utf-8"))
        except (ValidationError, OSError) as e:
            logger.warning("Failed to load transcript %s: %s", transcript_id, e)
            return None

    def list_results(self, limit: int = 20) -> list[TranscriptRecord]:
        """Most recent records first."""
        records: list[TranscriptRecord] = []
        for path in self._results_dir.glob("*.json"):
            try:
                records.append(TranscriptRecord.model_validate_json(path.read_text("utf-8")))
            except (ValidationError, OSError):
                continue
        records.sort(key=lambda r: r.created_at, reverse=True)
        return records[:limit]

    # -- internal ------------------------------------------------------------

    @staticmethod
    def _atomic_write(dest: Path, content: str) -> None:
        """Write via temp file + rename to avoid partial writes."""
        tmp_fd, tmp_path = tempfile.mkstemp(
            dir=str(dest.parent), suffix=".tmp"
        )
        try:
            with open(tmp_fd, "w", encoding="utf-8") as f:
                f.write(content)
            Path(tmp_path).replace(dest)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
