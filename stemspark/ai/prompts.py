# stemspark/ai/prompts.py
from stemspark.schemas.generation import ExplanationFormat, ExplanationRequest

SYSTEM_INSTRUCTION = (
    "You are a friendly, patient, and enthusiastic AI assistant for a children's STEM learning app. "
    "Your goal is to explain scientific and technical concepts to children in an engaging, encouraging, "
    "and easily understandable way. Always use a warm, positive, and encouraging tone. Keep sentences short, "
    "use simple language, and focus on the main ideas. Avoid complex jargon unless you explain it very simply. "
    "For quizzes, strictly adhere to the requested JSON format. For other formats, aim for a maximum of 500 words "
    "unless the specific format (like a story or comic) inherently requires more length to be coherent, "
    "but still prioritize conciseness."
)

READ_ALOUD_INSTRUCTIONS = (
    "Craft the explanation to be easily read aloud. Use smooth, natural phrasing, simple vocabulary suitable "
    "for the age, and structure sentences with clear pauses or breaks where appropriate (e.g., after sentences "
    "or distinct ideas). The goal is a text that sounds good and is easy to follow when spoken."
)
CONCISE_INSTRUCTIONS = "Ensure the explanation is clear and concise."
WORD_LIMIT_INSTRUCTION = "Keep the explanation concise, ideally under 500 words."


def _plain(req: ExplanationRequest) -> str:
    return "Provide a clear, simplified explanation with relatable examples appropriate for the child's age."

def _analogy(req: ExplanationRequest) -> str:
    return (
        "Compare the topic to something familiar to a child of that age. Make the analogy easy to understand "
        "and directly relevant to the core concept."
    )

def _story(req: ExplanationRequest) -> str:
    return (
        "Tell a short, imaginative narrative or scenario featuring the topic. The story should be simple, "
        "engaging for a child, and directly related to explaining the concept. Ensure the story has a clear "
        "beginning, middle, and end that helps illustrate the topic."
    )

def _comic(req: ExplanationRequest) -> str:
    return f"""Write a script for a short, engaging comic dialogue aimed at children.
The comic should explain the topic: "{req.topic}" in a fun, visual, and easy-to-understand way for a {req.ageLevel}-year-old.
The script should feature 2-3 simple, friendly characters (e.g., "Pip" the curious mouse, "Sparky" the energetic squirrel, "Professor Whiskers" the wise old owl).
The script must:
- Clearly label speaker turns (e.g., "Pip:", "Sparky:", "Professor Whiskers:").
- Include brief, parenthetical descriptions for simple actions, expressions, or scene settings (e.g., "(Pip scratches head, looking confused)", "(Panel: They are looking at a large diagram of a plant cell)").
- Ensure the language is age-appropriate, engaging, and uses simple vocabulary.
- The main goal is to explain the topic effectively through their dialogue and the described visual cues.
- Keep the overall comic dialogue concise, ideally fitting into a few panels if it were drawn."""

def _quiz(req: ExplanationRequest) -> str:
    return f"""Create an age-appropriate multiple-choice quiz about the topic "{req.topic}" for a {req.ageLevel}-year-old.
The quiz should consist of 3 to 4 questions.
For each question, provide:
1.  A "question" text.
2.  An array of "options" (strings), typically 3 or 4 choices.
3.  A "correctAnswerIndex" (a zero-based number indicating which option is correct).
4.  A brief "explanation" for why the answer is correct, to be shown after the user answers.

Return the quiz as a JSON array of objects, where each object represents a question and follows this exact structure:
{{
  "question": "string",
  "options": ["string", "string", ...],
  "correctAnswerIndex": number,
  "explanation": "string"
}}
Ensure the entire response is a single valid JSON array. The language for the quiz content (questions, options, explanations) should be {req.language}."""

FORMAT_INSTRUCTIONS = {
    ExplanationFormat.PLAIN: _plain,
    ExplanationFormat.ANALOGY: _analogy,
    ExplanationFormat.STORY: _story,
    ExplanationFormat.COMIC: _comic,
    ExplanationFormat.QUIZ: _quiz,
}

_missing = set(ExplanationFormat) - set(FORMAT_INSTRUCTIONS)
if _missing:
    raise RuntimeError(f"No prompt instructions for formats: {sorted(f.value for f in _missing)}")


def build_prompt(req: ExplanationRequest) -> str:
    instructions = FORMAT_INSTRUCTIONS[req.format](req)
    if req.format == ExplanationFormat.QUIZ:
        return instructions

    read_aloud = READ_ALOUD_INSTRUCTIONS if req.readAloud else CONCISE_INSTRUCTIONS
    fmt = req.format.value
    return f"""
Explain the topic: "{req.topic}"
To a child who is {req.ageLevel} years old.
Use the "{fmt}" format.
The explanation should be in {req.language}.
{read_aloud}
{WORD_LIMIT_INSTRUCTION}

Specific instructions for the "{fmt}" format:
{instructions}

Please generate the content now.
"""

def build_suggestion_prompt(topic: str, age_level: int, language: str) -> str:
    return f"""A child (age {age_level}) just learned about the topic: '{topic}' in {language}.
Suggest one engaging and closely related STEM topic that this child might be curious to learn about next.
Provide ONLY the name of the suggested topic as a short, concise string (e.g., 'Volcanoes', 'The Life Cycle of a Butterfly', 'Simple Machines').
The suggested topic should also be in {language}.
Do not add any introductory phrases like 'A good next topic could be:' or any explanation for your suggestion. Just the topic name itself."""
