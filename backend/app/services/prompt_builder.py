"""Prompt construction for question generation."""

import json
from dataclasses import dataclass
from typing import Any, Dict

SYSTEM_PROMPT = """You are a Senior Technical Examiner. Your goal is to generate multiple-choice questions based STRICTLY on the provided documentation.

Difficulty Guidelines:
- Beginner: Focus on 'mental_model' and 'meta.description'. Conceptual understanding.
- Intermediate: Focus on 'usage_patterns' and 'syntax'. Practical implementation.
- Advanced: Focus on 'common_pitfalls' and 'best_practices'. Debugging and optimization.

Output Format:
Return a valid JSON array of objects (AND NOTHING ELSE) with this schema:
[
  {
    "content": {
      "question_text": "...",
      "options": ["A", "B", "C", "D"],
      "correct_answer_index": 0,
      "code_snippet": "Optional code here..."
    },
    "explanation": "..."
  }
]
Do not add prose before or after the array and do not wrap it in markdown code fences."""


@dataclass(frozen=True)
class Prompt:
    system: str
    user: str


def build_prompt(record: Dict[str, Any], difficulty: str, count: int) -> Prompt:
    """Embed the full documentation record and ask for `count` questions at `difficulty`."""
    taxonomy = record.get("taxonomy") or {}
    category = taxonomy.get("category") if isinstance(taxonomy, dict) else None
    subject = f"{category or 'General'}/{record.get('name', 'Unknown')}"

    user = f"""Context:
{json.dumps(record, indent=2, ensure_ascii=False)}

Task:
Generate exactly {count} {difficulty} questions about {subject}.
Ensure the questions are derived ONLY from the provided JSON content.
Return only the JSON array. Do not include markdown formatting like ```json."""

    return Prompt(system=SYSTEM_PROMPT, user=user)
