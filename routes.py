import logging
from flask import Blueprint, request, jsonify

from interview_logic import InterviewSession
from models import Candidate, Interview
from utilities.errors import (
    ApiError, FileExtractionError, InvalidResponse, PreconditionError, TransportError, ValidationError,
)
from utilities.extractors import extract_text

logger = logging.getLogger(__name__)

# Create a Flask Blueprint to organize routes
main_bp = Blueprint('main', __name__)

# Store connection objects from the app factory
r = None
db = None
client = None

CLIENT_ERRORS = (ValidationError, PreconditionError, FileExtractionError)
REMOTE_ERRORS = (TransportError, ApiError, InvalidResponse)

CANDIDATE_FIELDS = ('name', 'resume', 'job_description', 'company_name', 'interviewer_name')
UPLOAD_FIELDS = {'resume': 'resume_file', 'job_description': 'job_description_file'}


def init_app(app, redis_conn, db_conn, completion_client):
    """Binds the connection objects and registers the blueprint with the Flask app."""
    global r, db, client
    r = redis_conn
    db = db_conn
    client = completion_client
    app.register_blueprint(main_bp)


def _session_payload(session):
    question = session.current_question()
    return {
        'session_id': session.session_id,
        'interview_id': session.interview.id if session.interview else None,
        'state': session.state,
        'progress': session.progress(),
        'question': question.text if question else None,
        'question_index': session.cursor,
        'error': session.error_message,
    }


# === Candidate intake ===

@main_bp.route('/candidates', methods=['POST'])
def create_candidate():
    """Creates a candidate from a JSON payload. Only 'name' is required here;
    the résumé/job description check happens when the interview starts."""
    data = request.get_json(silent=True) or {}
    bad = [k for k in CANDIDATE_FIELDS if data.get(k) is not None and not isinstance(data[k], str)]
    if bad:
        return jsonify({'error': f"{', '.join(bad)} must be text."}), 400
    if not (data.get('name') or '').strip():
        return jsonify({'error': 'Candidate name is required.'}), 400

    candidate = Candidate(**{k: (data.get(k) or '').strip() for k in CANDIDATE_FIELDS})
    candidate.interviewer_name = candidate.interviewer_name or None
    db.session.add(candidate)
    db.session.commit()
    return jsonify(candidate.to_dict()), 201


@main_bp.route('/candidates', methods=['GET'])
def list_candidates():
    candidates = Candidate.query.order_by(Candidate.created_at.desc(), Candidate.id.desc()).all()
    return jsonify([c.to_dict() for c in candidates])


@main_bp.route('/candidates/<int:candidate_id>', methods=['GET'])
def get_candidate(candidate_id):
    candidate = db.session.get(Candidate, candidate_id)
    if not candidate:
        return jsonify({'error': 'Candidate not found.'}), 404
    return jsonify(candidate.to_dict())


@main_bp.route('/candidates/<int:candidate_id>', methods=['DELETE'])
def delete_candidate(candidate_id):
    candidate = db.session.get(Candidate, candidate_id)
    if not candidate:
        return jsonify({'error': 'Candidate not found.'}), 404
    db.session.delete(candidate)
    db.session.commit()
    return '', 204


@main_bp.route('/candidates/<int:candidate_id>/files', methods=['POST'])
def upload_candidate_files(candidate_id):
    """Extracts text from uploaded 'resume' and/or 'job_description' files
    (txt, pdf, docx) and stores it on the candidate."""
    candidate = db.session.get(Candidate, candidate_id)
    if not candidate:
        return jsonify({'error': 'Candidate not found.'}), 404

    uploads = {field: request.files[field] for field in UPLOAD_FIELDS if field in request.files}
    if not uploads:
        return jsonify({'error': 'Upload a resume or job_description file.'}), 400

    try:
        for field, storage in uploads.items():
            text = extract_text(storage.stream, storage.filename, storage.mimetype)
            setattr(candidate, UPLOAD_FIELDS[field], text)
    except FileExtractionError as e:
        db.session.rollback()
        return jsonify({'error': str(e)}), 400

    db.session.commit()
    return jsonify(candidate.to_dict())


# === API Endpoints for Interview Flow ===

@main_bp.route('/start-interview', methods=['POST'])
def start_interview():
    """Starts a new interview session.

    Expects a JSON payload with 'candidate_id'. Generates the questions,
    stores the interview, saves the session state to Redis and returns
    the session_id together with the first question.
    """
    if not r:
        return jsonify({'error': 'Session store not available.'}), 500

    data = request.get_json(silent=True) or {}
    try:
        candidate_id = int(data.get('candidate_id'))
    except (TypeError, ValueError):
        return jsonify({'error': 'candidate_id is required.'}), 400

    candidate = db.session.get(Candidate, candidate_id)
    if not candidate:
        return jsonify({'error': 'Candidate not found.'}), 404

    session = InterviewSession(client, db.session)
    try:
        session.start(candidate)
    except CLIENT_ERRORS as e:
        return jsonify({'error': str(e)}), 400
    except REMOTE_ERRORS as e:
        logger.warning("Could not start interview for candidate %s: %s", candidate_id, e)
        return jsonify({'error': session.error_message}), 502

    session.save(r)
    return jsonify(_session_payload(session))


@main_bp.route('/submit', methods=['POST'])
def submit():
    """
    Handles answer submission from the client.
    - Expects 'session_id' and 'answer' in the JSON payload.
    - Loads the session from Redis and scores the answer.
    - Returns feedback and score, plus the next question or, once the last
      question is answered, the overall score and summary.
    - On a remote failure the session keeps its position so the client can retry.
    """
    if not r:
        return jsonify({'error': 'Session store not available.', 'finished': True}), 500

    data = request.get_json(silent=True) or {}
    session_id = data.get('session_id')
    answer = data.get('answer')
    if not session_id or not answer:
        return jsonify({'error': 'Session ID and answer are required.'}), 400
    if not isinstance(session_id, str) or not isinstance(answer, str):
        return jsonify({'error': 'Session ID and answer must be text.'}), 400

    session = InterviewSession.load(r, session_id, client, db.session)
    if not session:
        return jsonify({'error': 'Session expired or not found.', 'finished': True}), 404

    try:
        question = session.submit_answer(answer)
    except PreconditionError as e:
        return jsonify({'error': str(e), 'finished': session.is_complete}), 400
    except REMOTE_ERRORS as e:
        logger.warning("Answer for session %s not scored: %s", session_id, e)
        session.save(r)
        return jsonify({
            'error': session.error_message,
            'progress': session.progress(),
            'finished': False,
        }), 502

    session.save(r)
    next_question = session.current_question()
    payload = {
        'feedback': question.feedback,
        'score': question.star_score.to_dict(),
        'progress': session.progress(),
        'finished': session.is_complete,
        'question': next_question.text if next_question else None,
    }
    if session.is_complete:
        payload['overall_score'] = session.interview.overall_score
        payload['summary'] = session.interview.feedback
    return jsonify(payload)


@main_bp.route('/sessions/<session_id>', methods=['GET'])
def get_session(session_id):
    if not r:
        return jsonify({'error': 'Session store not available.'}), 500
    session = InterviewSession.load(r, session_id, client, db.session)
    if not session:
        return jsonify({'error': 'Session expired or not found.'}), 404
    return jsonify(_session_payload(session))


@main_bp.route('/interviews/<int:interview_id>', methods=['GET'])
def get_interview(interview_id):
    interview = db.session.get(Interview, interview_id)
    if not interview:
        return jsonify({'error': 'Interview not found.'}), 404
    return jsonify(interview.to_dict())

