# Question generation and the InterviewSession orchestrator.
import logging
import uuid
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from models import Interview, Question
from scorecard import analyze_star_components, build_summary, calculate_overall_score, generate_feedback
from utilities.constants import NO_JOB_DESCRIPTION_FILE, NO_RESUME_FILE, QUESTION_COUNT, SESSION_TTL_SEC
from utilities.errors import InterviewError, InvalidResponse, PreconditionError, ValidationError
from utilities.validators import validate_candidate

logger = logging.getLogger(__name__)

NOT_STARTED = 'not_started'
GENERATING = 'generating'
IN_PROGRESS = 'in_progress'
COMPLETE = 'complete'
STATES = (NOT_STARTED, GENERATING, IN_PROGRESS, COMPLETE)


def parse_questions(text, limit=QUESTION_COUNT):
    """Split a completion into at most `limit` trimmed, non-empty lines."""
    lines = (line.strip() for line in text.splitlines())
    return [line for line in lines if line][:limit]


def generate_questions(client, candidate):
    """Asks the model for five STAR questions tailored to the candidate.

    Returns whatever the model produced, up to five questions; fewer lines
    in the response mean fewer questions.
    """
    prompt = (
        f"Generate {QUESTION_COUNT} behavioral interview questions for a candidate with the following background:\n"
        f"Name: {candidate.name}\n"
        f"Resume: {candidate.resume}\n"
        f"Job Description: {candidate.job_description}\n"
        f"Company: {candidate.company_name}\n\n"
        "Additional context from uploaded files:\n"
        f"Resume Content: {candidate.resume_file or NO_RESUME_FILE}\n"
        f"Job Description Content: {candidate.job_description_file or NO_JOB_DESCRIPTION_FILE}\n\n"
        "The questions should:\n"
        "1. Be specific to their background and the job\n"
        "2. Follow the STAR method format\n"
        "3. Focus on key competencies required for the role\n"
        "4. Be challenging but fair\n"
        "5. Help assess their problem-solving and communication skills\n\n"
        "Format each question as a clear, concise sentence ending with a question mark.\n"
        f"Return exactly {QUESTION_COUNT} questions, one per line."
    )
    logger.info("Generating questions for candidate: %s", candidate.name)
    questions = parse_questions(client.complete(prompt))
    if len(questions) < QUESTION_COUNT:
        logger.warning("Model returned %d of %d questions", len(questions), QUESTION_COUNT)
    return questions


class InterviewSession:
    """Drives one interview from question generation to the final summary.

    States: not_started -> generating -> in_progress -> complete.
    `error_message` is set whenever a step fails and cleared by the next
    successful step; the cursor and stored answers are kept so the caller
    can retry just the failed call.
    """

    def __init__(self, client, store, session_id=None):
        self.client = client
        self.store = store
        self.session_id = session_id if session_id else str(uuid.uuid4())
        self.state = NOT_STARTED
        self.interview = None
        self.cursor = 0
        self.error_message = None

    # --- Redis-backed session state ---

    def to_dict(self):
        return {
            'session_id': self.session_id,
            'interview_id': self.interview.id if self.interview else '',
            'state': self.state,
            'cursor': self.cursor,
            'error_message': self.error_message or '',  # Convert None to empty string
        }

    @classmethod
    def from_dict(cls, data, client, store):
        session = cls(client, store, session_id=data['session_id'])
        state = data.get('state', NOT_STARTED)
        session.state = state if state in STATES else NOT_STARTED
        try:
            session.cursor = int(data.get('cursor', 0))
        except (TypeError, ValueError):
            session.cursor = 0
        session.error_message = data.get('error_message') or None
        interview_id = data.get('interview_id')
        if interview_id:
            session.interview = store.get(Interview, int(interview_id))
        return session

    def save(self, r):
        if r:
            key = f"session:{self.session_id}"
            r.hset(key, mapping=self.to_dict())
            r.expire(key, SESSION_TTL_SEC)

    @classmethod
    def load(cls, r, session_id, client, store):
        if r:
            data = r.hgetall(f"session:{session_id}")
            if data:
                return cls.from_dict(data, client, store)
        return None

    # --- Queries ---

    @property
    def is_complete(self):
        return self.state == COMPLETE

    def current_question(self):
        if not self.interview or not 0 <= self.cursor < len(self.interview.questions):
            return None
        return self.interview.questions[self.cursor]

    def progress(self):
        if not self.interview or not self.interview.questions:
            return 0.0
        return self.cursor / len(self.interview.questions)

    # --- Workflow ---

    def start(self, candidate):
        if self.state != NOT_STARTED:
            raise PreconditionError(f"Interview already started (state: {self.state})")

        self.error_message = None
        try:
            validate_candidate(candidate)
        except ValidationError as e:
            self.error_message = str(e)
            raise

        self.state = GENERATING
        try:
            texts = generate_questions(self.client, candidate)
            if not texts:
                raise InvalidResponse("The model did not return any questions")
        except InterviewError as e:
            self.state = NOT_STARTED
            self.error_message = f"Failed to start interview: {e}"
            logger.error("Error starting interview for %s: %s", candidate.name, e)
            raise

        interview = Interview(candidate=candidate, start_time=datetime.utcnow())
        interview.questions = [Question(text=text, order=i) for i, text in enumerate(texts)]
        try:
            self.store.add(interview)
            self.store.commit()
        except SQLAlchemyError as e:
            self.store.rollback()
            self.state = NOT_STARTED
            self.error_message = f"Failed to save interview: {e}"
            logger.error("Could not persist interview for %s: %s", candidate.name, e)
            raise

        self.interview = interview
        self.cursor = 0
        self.state = IN_PROGRESS
        logger.info("Interview %s started with %d questions", interview.id, len(texts))
        return interview

    def submit_answer(self, answer):
        if self.state != IN_PROGRESS:
            raise PreconditionError(f"No interview in progress (state: {self.state})")
        if not isinstance(answer, str) or not answer.strip():
            raise PreconditionError("Answer must not be empty")
        question = self.current_question()
        if question is None:
            raise PreconditionError("No current question")

        self.error_message = None
        question.answer = answer
        try:
            feedback = generate_feedback(self.client, question.text, answer)
            question.feedback = feedback
            score = analyze_star_components(self.client, answer)
        except InterviewError as e:
            self.error_message = f"Failed to submit answer: {e}"
            logger.error("Error scoring question %s of interview %s: %s", question.order, self.interview.id, e)
            raise

        question.star_score = score
        logger.info("[SCORE] Q%d: '%s...', average %.2f", question.order + 1, question.text[:50], score.average)

        self.cursor += 1
        if self.cursor >= len(self.interview.questions):
            self._finish()
        self.store.commit()
        return question

    def _finish(self):
        interview = self.interview
        overall = calculate_overall_score([q.star_score for q in interview.questions])
        interview.overall_score = overall
        interview.feedback = build_summary(interview.candidate.name, len(interview.questions), overall)
        interview.end_time = datetime.utcnow()
        self.state = COMPLETE
        logger.info("Interview %s complete, overall score %.2f", interview.id, overall)
