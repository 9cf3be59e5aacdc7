"""Quiz-related constants shared across the core and server layers."""

from quiz_shuffle.core.models import QuestionType

OPTION_LABELS: str = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

# Types whose options may be reordered per participant.
SHUFFLEABLE_TYPES: frozenset[QuestionType] = frozenset(
    {
        QuestionType.SINGLE_CHOICE,
        QuestionType.TRUE_FALSE,
        QuestionType.MULTIPLE_ANSWER,
    }
)
MANUALLY_GRADED_TYPES: frozenset[QuestionType] = frozenset({QuestionType.SHORT_ANSWER})

# Legacy tags found in older quiz files.
QUESTION_TYPE_ALIASES: dict[str, QuestionType] = {
    "multiple-choice": QuestionType.SINGLE_CHOICE,
    "fill-blank": QuestionType.FILL_IN_BLANK,
}
DEFAULT_QUESTION_TYPE: QuestionType = QuestionType.SINGLE_CHOICE

UNKNOWN_PARTICIPANT_NAME: str = "Unknown"
