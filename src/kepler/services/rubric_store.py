"""Rubric source.

Rubrics come from a JSON file (an array of rubric objects) when
``rubrics_file`` is configured, otherwise from the built-in introduction
rubric set below. The file is re-read on every call so edits apply to the
next scoring request without a restart.
"""

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from kepler.exceptions import RubricSourceError
from kepler.schemas.rubric import Rubric

logger = logging.getLogger(__name__)

_RUBRIC_LIST = TypeAdapter(list[Rubric])

# ------------------------------------------------------------------ #
#  Built-in self-introduction rubrics
# ------------------------------------------------------------------ #

_BUILTIN_RUBRICS: list[Rubric] = [
    Rubric(
        id="introduction",
        criterion_name="Introduction & Greeting",
        criterion_description="Greet the listener and introduce yourself with name and role.",
        keywords="hello,hi,good morning,good afternoon,name,introduce,introduction",
        weight=0.2,
        min_words=10,
        max_words=80,
    ),
    Rubric(
        id="background",
        criterion_name="Background / Education",
        criterion_description=(
            "Mention your study or professional background and key qualifications."
        ),
        keywords=(
            "degree,studied,graduated,engineer,computer,education,university,college,major"
        ),
        weight=0.25,
        min_words=10,
        max_words=120,
    ),
    Rubric(
        id="skills",
        criterion_name="Skills / Achievements",
        criterion_description="Talk about your skills, achievements or projects briefly.",
        keywords=(
            "project,skill,achievement,experience,internship,certified,developed,built,led"
        ),
        weight=0.3,
        min_words=10,
        max_words=150,
    ),
    Rubric(
        id="closing",
        criterion_name="Closing / Call to Action",
        criterion_description=(
            "End with a closing statement or what you seek next (opportunity, interview)."
        ),
        keywords=(
            "thank you,thanks,contact,looking forward,opportunity,interested,appreciate"
        ),
        weight=0.25,
        min_words=5,
        max_words=50,
    ),
]


class RubricStore:
    def __init__(self, rubrics_file: Path | None = None) -> None:
        self._rubrics_file = rubrics_file

    @property
    def source(self) -> str:
        return str(self._rubrics_file) if self._rubrics_file else "builtin"

    def list_all(self) -> list[Rubric]:
        if self._rubrics_file is None:
            return list(_BUILTIN_RUBRICS)
        return self._load_file(self._rubrics_file)

    def list_active(self) -> list[Rubric]:
        """Active rubrics ordered by criterion name."""
        active = [r for r in self.list_all() if r.is_active]
        return sorted(active, key=lambda r: r.criterion_name)

    @staticmethod
    def _load_file(path: Path) -> list[Rubric]:
        try:
            data = json.loads(path.read_text("utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to read rubrics file %s: %s", path, e)
            raise RubricSourceError(f"Failed to read rubrics file: {e}") from e

        if not isinstance(data, list):
            raise RubricSourceError("Rubrics file must contain a JSON array")
        try:
            rubrics = _RUBRIC_LIST.validate_python(data)
        except ValidationError as e:
            logger.error("Invalid rubric in %s: %s", path, e)
            raise RubricSourceError(f"Invalid rubric definition: {e}") from e

        logger.info("Loaded %d rubrics from %s", len(rubrics), path)
        return rubrics
