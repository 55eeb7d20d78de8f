# Prompt templates for clinical scenario generation

DIFFICULTY_AUDIENCES = {
    "basic": "first or second year medical student",
    "intermediate": "third year medical student on clinical rotations",
    "advanced": "fourth year medical student or resident",
}

FORMAT_TEMPLATES = {
    "long": {
        "description": "detailed narrative format",
        "requirements": "Provide comprehensive explanations and reasoning. Ensure answers are prose.",
    },
    "short": {
        "description": "concise bullet points",
        "requirements": "Keep responses brief but clinically accurate, using bullet points in answers.",
    },
    "sba": {
        "description": "single best answer question format",
        "requirements": (
            'Include exactly 5 options (A-E) with one clearly correct answer. '
            'Options must be within the "Question:" section. '
            'The "Answer:" section must clearly state the correct option and provide detailed reasoning.'
        ),
    },
    "osce": {
        "description": "OSCE station style",
        "requirements": (
            'Include a "Marking Criteria:" section within the "Answer:" '
            'with at least 5 key points to cover, using bullet points.'
        ),
    },
}

FORMAT_EXAMPLES = {
    "long": """Scenario 1: Patient presentation...

Question: What is the most likely diagnosis?

Answer: The most likely diagnosis is...""",
    "sba": """Scenario 1: Patient presentation...

Question: What is the next best step?
A) Option 1
B) Option 2
C) Option 3
D) Option 4
E) Option 5

Answer: The correct answer is C) Option 3 because...""",
    "osce": """Scenario 1: Patient presentation...

Question: Perform a focused cardiovascular exam.

Answer: Key findings would include...
Marking Criteria:
- Correctly identifies heart sounds
- Checks for peripheral edema
- Assesses jugular venous pressure
- Documents findings clearly
- Provides appropriate differential""",
}

OSCE_CRITERIA_LINE = "Marking Criteria: [At least 5 bullet points for grading.]"

SCENARIO_PROMPT = """You are a medical education expert creating clinical scenario questions for {audience}.
Language: {language}
Format: {format_description}

For the topic: {topic}

Generate {count} high-quality clinical scenario questions. Each scenario must strictly follow this structure:

Scenario #: [Patient Presentation goes here. This should be a detailed narrative including history, physical exam findings, and diagnostic test results.]

Question: [Clear clinical question asking what to do next or for diagnosis/management. For SBA, include A) B) C) D) E) options here.]

Answer: [Detailed explanation, including:
  * The most likely diagnosis
  * Diagnostic approach
  * Immediate management steps
  * Key teaching points
  * Relevant differential diagnoses
  {criteria_line}
]

Additional requirements for {format_description} format:
{format_requirements}

General requirements for all formats:
- Ensure a realistic patient case appropriate for {audience}.
- Challenge the student's diagnostic reasoning.
- Cover important learning points about the topic.
- Include references to latest guidelines where applicable.
- Highlight red flag symptoms when relevant.
- Provide estimated prevalence if discussing rare conditions.
- **IMPORTANT: Each scenario MUST start with "Scenario #:" (e.g., "Scenario 1:").**
- **IMPORTANT: Ensure each section is substantial and not empty.**
- **IMPORTANT: The "Question:" and "Answer:" headings MUST be present and exact.**

Example of the expected structure:
{example}
"""


def build_scenario_prompt(request) -> str:
    """
    Builds the instruction text for one ScenarioRequest.
    Difficulty and format must already be one of the known values.
    """
    template = FORMAT_TEMPLATES[request.format]
    audience = DIFFICULTY_AUDIENCES[request.difficulty]

    return SCENARIO_PROMPT.format(
        audience=audience,
        language=request.language,
        format_description=template["description"],
        format_requirements=template["requirements"],
        topic=request.topic,
        count=request.count,
        criteria_line=OSCE_CRITERIA_LINE if request.format == "osce" else "",
        example=FORMAT_EXAMPLES.get(request.format, FORMAT_EXAMPLES["long"]),
    )
