"""
Scenario Extractor

Turns free-text model output into Scenario candidates:
  1. Normalise the start of the text ("Scenario 1:" is synthesised when the
     model skipped it but a "Question:" heading exists)
  2. Split on "Scenario <n>" markers into blocks
  3. Slice each block into presentation / question / answer
  4. Format refinement: SBA options out of the question,
     OSCE marking criteria out of the answer

A block that blows up while parsing comes back blank so validation rejects it,
the rest of the batch is unaffected.
"""
import re
from typing import List, Tuple

from scenario_generation.models import Scenario
from utils.logger import get_logger

logger = get_logger(__name__)

SCENARIO_MARKER = re.compile(r"Scenario[ \t]+(\d+)[ \t]*:?", re.IGNORECASE)

PRESENTATION_PATTERN = re.compile(
    r"Scenario[ \t]+\d+[ \t]*:?(.*?)(?=Question:|Answer:|\Z)", re.IGNORECASE | re.DOTALL
)
QUESTION_PATTERN = re.compile(r"Question:(.*?)(?=Answer:|\Z)", re.IGNORECASE | re.DOTALL)
ANSWER_PATTERN = re.compile(r"Answer:(.*)", re.IGNORECASE | re.DOTALL)

# "A) Aspirin", "B. ECG"
OPTION_PATTERN = re.compile(r"^[A-E][).]\s*\S")
OPTION_MARKER = re.compile(r"^[A-E][).]\s*")

CRITERIA_PATTERN = re.compile(r"(?:Marking Criteria|Key Points):(.*)", re.IGNORECASE | re.DOTALL)
BULLET_MARKER = re.compile(r"^[-*•]\s*")

# Markdown the model likes to wrap headings in: "**Question:**", "## Scenario 2"
BOLD_MARKUP = re.compile(r"\*\*")
UNDERSCORE_MARKUP = re.compile(
    r"__((?:Scenario[ \t]+\d+|Question|Answer|Marking Criteria|Key Points)[ \t]*:?)__", re.IGNORECASE
)
HEADING_MARKUP = re.compile(r"^[ \t]*#+[ \t]*", re.MULTILINE)


def strip_markdown(text: str) -> str:
    text = UNDERSCORE_MARKUP.sub(r"\1", BOLD_MARKUP.sub("", text))
    return HEADING_MARKUP.sub("", text)


def split_scenario_blocks(text: str) -> List[Tuple[str, str]]:
    """
    Splits raw model text into (id, block_text) pairs.
    Returns [] when the text has neither a "Scenario" start nor a "Question:" heading.
    """
    cleaned = strip_markdown(text).strip()

    if not cleaned.startswith("Scenario"):
        if "Question:" in cleaned:
            # Everything before the first question is scenario 1's presentation
            cleaned = f"Scenario 1:\n{cleaned}"
        else:
            logger.warning("AI response does not contain 'Scenario #' or 'Question:'. Cannot reliably parse.")
            return []

    # re.split keeps the captured ids: ['', '1', body, '2', body, ...]
    parts = SCENARIO_MARKER.split(cleaned)
    blocks = []
    for i in range(1, len(parts), 2):
        scenario_id = parts[i]
        content = parts[i + 1] if i + 1 < len(parts) else ""
        if scenario_id and content:
            blocks.append((scenario_id, f"Scenario {scenario_id}:\n{content}"))

    return blocks


def _extract_sections(block: str, scenario: Scenario) -> None:
    id_match = SCENARIO_MARKER.search(block)
    if id_match:
        scenario.id = id_match.group(1)

    presentation = PRESENTATION_PATTERN.search(block)
    if presentation and presentation.group(1).strip():
        scenario.presentation = presentation.group(1).strip()
    else:
        logger.warning(f"Scenario {scenario.id}: Presentation not found or empty after stripping 'Scenario #:'.")

    question = QUESTION_PATTERN.search(block)
    if question and question.group(1).strip():
        scenario.question = question.group(1).strip()
    else:
        logger.warning(f"Scenario {scenario.id}: Question not found or empty.")

    answer = ANSWER_PATTERN.search(block)
    if answer and answer.group(1).strip():
        scenario.answer = answer.group(1).strip()
    else:
        logger.warning(f"Scenario {scenario.id}: Answer not found or empty.")


def extract_sba_options(scenario: Scenario) -> None:
    """Moves lettered option lines out of the question stem into `options`."""
    stem_lines = []
    option_lines = []

    for raw_line in scenario.question.split("\n"):
        line = raw_line.strip()
        if OPTION_PATTERN.match(line):
            option_lines.append(line)
        else:
            stem_lines.append(line)

    scenario.question = "\n".join(stem_lines).strip()
    scenario.options = [OPTION_MARKER.sub("", opt).strip() for opt in option_lines]


def extract_marking_criteria(scenario: Scenario) -> None:
    """Moves the trailing "Marking Criteria:" bullets out of the answer."""
    match = CRITERIA_PATTERN.search(scenario.answer)
    if not match or not match.group(1).strip():
        return

    criteria = []
    for raw_line in match.group(1).split("\n"):
        line = BULLET_MARKER.sub("", raw_line.strip()).strip()
        if line:
            criteria.append(line)

    scenario.marking_criteria = criteria
    # The heading runs to the end of the answer, so drop everything from it on
    scenario.answer = scenario.answer[:match.start()].strip()


def parse_scenario_block(block: str, fmt: str, scenario_id: str = "0") -> Scenario:
    scenario = Scenario.blank(scenario_id)
    _extract_sections(block, scenario)

    if fmt == "sba":
        extract_sba_options(scenario)
    elif fmt == "osce":
        extract_marking_criteria(scenario)

    return scenario


def safe_parse_block(block: str, fmt: str, scenario_id: str = "0") -> Scenario:
    """
    Error boundary around one block: a failure yields a blank scenario
    (empty presentation/question/answer) which is guaranteed to fail validation.
    """
    try:
        return parse_scenario_block(block, fmt, scenario_id)
    except Exception:
        logger.exception(f"Error during detailed parsing for scenario {scenario_id}")
        return Scenario.blank(scenario_id)


def extract_scenarios(text: str, fmt: str) -> List[Scenario]:
    """
    Converts raw model text into an ordered list of Scenario candidates.
    Ids are kept as the model wrote them (no de-duplication).
    """
    if not text:
        logger.warning("AI response is empty.")
        return []

    blocks = split_scenario_blocks(text)
    candidates = [safe_parse_block(block, fmt, scenario_id) for scenario_id, block in blocks]

    logger.info(f"Extracted {len(candidates)} scenario candidates ({fmt})")
    return candidates


def render_block(scenario: Scenario, fmt: str) -> str:
    """Writes a Scenario back out in the block layout the extractor reads."""
    question = scenario.question
    if fmt == "sba" and scenario.options:
        letters = "ABCDE"
        option_lines = [f"{letters[i]}) {opt}" for i, opt in enumerate(scenario.options[:5])]
        question = "\n".join([question] + option_lines)

    answer = scenario.answer
    if fmt == "osce" and scenario.marking_criteria:
        bullets = "\n".join(f"- {c}" for c in scenario.marking_criteria)
        answer = f"{answer}\nMarking Criteria:\n{bullets}"

    return f"Scenario {scenario.id}: {scenario.presentation}\n\nQuestion: {question}\n\nAnswer: {answer}"
