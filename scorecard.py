import logging
import math
from dataclasses import dataclass, asdict

from utilities.constants import NO_ANSWER, STAR_COMPONENTS, SUMMARY_IMPROVEMENTS, SUMMARY_STRENGTHS
from utilities.errors import InvalidResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StarScore:
    """Four STAR sub-scores, nominally each in [0.0, 1.0]."""
    situation: float
    task: float
    action: float
    result: float

    @property
    def average(self) -> float:
        return (self.situation + self.task + self.action + self.result) / 4.0

    def to_dict(self):
        d = asdict(self)
        d['average'] = self.average
        return d


def generate_feedback(client, question_text, answer_text):
    """Asks the model for a STAR critique of one answer. Returns its text verbatim."""
    prompt = f"""Analyze the following interview question and answer using the STAR method (Situation, Task, Action, Result).

Question: {question_text}
Answer: {answer_text or NO_ANSWER}

Provide constructive feedback on:
1. How well the answer follows the STAR method
2. Specific strengths in the answer
3. Areas for improvement
4. Suggestions for a stronger response

Format your feedback in a clear, concise paragraph."""
    return client.complete(prompt)


def parse_star_scores(text):
    """Parses "0.8,0.7,0.9,0.6" into a StarScore.

    Tokens that are not finite numbers (including "nan" and "inf") are dropped.
    Exactly four numbers must remain, otherwise InvalidResponse is raised.
    The range is not enforced.
    """
    values = []
    for token in text.split(','):
        try:
            value = float(token.strip())
        except ValueError:
            continue
        if math.isfinite(value):
            values.append(value)

    if len(values) != len(STAR_COMPONENTS):
        raise InvalidResponse(f"Expected 4 STAR scores, got {len(values)}: {text[:100]!r}")

    score = StarScore(*values)
    if any(v < 0.0 or v > 1.0 for v in values):
        logger.warning("STAR scores outside [0, 1] accepted as-is: %s", values)
    return score


def analyze_star_components(client, answer_text):
    """Asks the model to score an answer on each STAR component."""
    prompt = f"""Analyze the following interview answer using the STAR method components:

{answer_text}

Score each component on a scale of 0.0 to 1.0:
- Situation: How well does the answer describe the context and background?
- Task: How well does the answer describe what needed to be done?
- Action: How well does the answer describe the actions taken?
- Result: How well does the answer describe the outcomes and impact?

Return only a simple numerical score for each component in the format: "0.8,0.7,0.9,0.6".
"""
    return parse_star_scores(client.complete(prompt))


def calculate_overall_score(scores):
    """Mean of per-question STAR averages. Unscored entries (None) are skipped."""
    scored = [s for s in scores if s is not None]
    if not scored:
        return 0.0
    return sum(s.average for s in scored) / len(scored)


def build_summary(candidate_name, question_count, overall_score):
    """Fixed-template end-of-interview summary. Not model generated."""
    lines = [
        f"Interview completed with {candidate_name or 'candidate'}",
        f"Total Questions: {question_count}",
        f"Overall Score: {int(round(overall_score * 100))}%",
        "",
        "Key Strengths:",
    ]
    lines += [f"- {item}" for item in SUMMARY_STRENGTHS]
    lines += ["", "Areas for Improvement:"]
    lines += [f"- {item}" for item in SUMMARY_IMPROVEMENTS]
    return "\n".join(lines)
