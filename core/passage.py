"""
Passage - The reading text a session is built around.

A passage's content is a sequence of paragraphs separated by blank lines.
Each non-empty paragraph is one section and carries exactly one question.
"""

import uuid
from dataclasses import dataclass, field
from typing import List, Optional

from .skills import DifficultyTier


def split_paragraphs(content: str) -> List[str]:
    """Split content on blank lines, dropping empty paragraphs."""
    return [p.strip() for p in content.split("\n\n") if p.strip()]


def new_passage_id() -> str:
    return f"passage-{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class Passage:
    """A titled passage. `sections` is derived from `content`."""
    title: str
    content: str
    difficulty: Optional[DifficultyTier] = None
    id: str = field(default_factory=new_passage_id)

    @property
    def sections(self) -> List[str]:
        return split_paragraphs(self.content)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "difficulty": self.difficulty.value if self.difficulty else None,
            "sections": self.sections,
        }


# Starting passage for every new session
DEFAULT_PASSAGE = Passage(
    id="passage-1",
    title="The Secret Life of Honeybees",
    difficulty=DifficultyTier.INTERMEDIATE,
    content=(
        "Inside every beehive, there is a world more organized than most human cities. "
        "A single hive can contain up to 60,000 bees, and every single one has a job to do."
        "\n\n"
        "At the center of the hive is the queen bee. She is the only bee that lays eggs, "
        "up to 2,000 per day during summer. Despite her title, the queen doesn't actually "
        "make decisions for the hive. Her main job is simply to lay eggs and keep the colony growing."
        "\n\n"
        "The worker bees are all female, and they do everything else. Young workers stay inside "
        "the hive, cleaning cells, feeding larvae, and building honeycomb from wax they produce "
        "from their own bodies. As they get older, they graduate to guarding the hive entrance. "
        "The oldest workers become foragers, flying up to five miles from the hive to collect "
        "nectar and pollen."
        "\n\n"
        "Male bees are called drones. They don't collect food, don't guard the hive, and don't "
        "have stingers. Their only purpose is to mate with queens from other hives. In autumn, "
        "when food becomes scarce, the workers push the drones out of the hive to conserve resources."
        "\n\n"
        "Bees communicate through dancing. When a forager finds a good source of flowers, she "
        "returns to the hive and performs a 'waggle dance' that tells other bees exactly where to "
        "find the food. The angle of her dance shows the direction relative to the sun, and the "
        "length of her waggle shows the distance."
        "\n\n"
        "This tiny insect has been making honey the same way for over 100 million years. Every "
        "spoonful of honey represents the life's work of about twelve bees."
    ),
)
