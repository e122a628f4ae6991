from extensions import db
from datetime import datetime

from scorecard import StarScore

# Note: The db instance is created in extensions.py
# and initialized in the app factory to avoid circular imports.


def _iso(value):
    return value.isoformat() if value else None


class Candidate(db.Model):
    """The person being interviewed, with their résumé/job-description intake."""
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    resume = db.Column(db.Text, nullable=False, default='')
    job_description = db.Column(db.Text, nullable=False, default='')
    company_name = db.Column(db.String(100), nullable=False, default='')
    # Text extracted from uploaded files
    resume_file = db.Column(db.Text, nullable=True)
    job_description_file = db.Column(db.Text, nullable=True)
    interviewer_name = db.Column(db.String(100), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    interviews = db.relationship('Interview', backref='candidate', lazy=True, cascade="all, delete-orphan")

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'resume': self.resume,
            'job_description': self.job_description,
            'company_name': self.company_name,
            'resume_file': self.resume_file,
            'job_description_file': self.job_description_file,
            'interviewer_name': self.interviewer_name,
            'created_at': _iso(self.created_at),
            'interview_ids': [i.id for i in self.interviews],
        }

    def __repr__(self):
        return f'<Candidate {self.id} {self.name}>'


class Interview(db.Model):
    """Represents a single interview session."""
    id = db.Column(db.Integer, primary_key=True)
    candidate_id = db.Column(db.Integer, db.ForeignKey('candidate.id'), nullable=False)
    start_time = db.Column(db.DateTime, default=datetime.utcnow)
    end_time = db.Column(db.DateTime, nullable=True)
    overall_score = db.Column(db.Float, nullable=True)
    feedback = db.Column(db.Text, nullable=True)

    # One-to-many; questions come back in interview order
    questions = db.relationship(
        'Question', backref='interview', lazy=True,
        cascade="all, delete-orphan", order_by='Question.order',
    )

    @property
    def is_complete(self):
        return bool(self.questions) and all(q.answer for q in self.questions)

    def to_dict(self):
        return {
            'id': self.id,
            'candidate_id': self.candidate_id,
            'start_time': _iso(self.start_time),
            'end_time': _iso(self.end_time),
            'overall_score': self.overall_score,
            'feedback': self.feedback,
            'is_complete': self.is_complete,
            'questions': [q.to_dict() for q in self.questions],
        }

    def __repr__(self):
        return f'<Interview {self.id} for Candidate {self.candidate_id}>'


class Question(db.Model):
    """A single question, and later its answer, within an interview."""
    id = db.Column(db.Integer, primary_key=True)
    interview_id = db.Column(db.Integer, db.ForeignKey('interview.id'), nullable=False)
    text = db.Column(db.Text, nullable=False)
    order = db.Column('order_index', db.Integer, nullable=False)
    answer = db.Column(db.Text, nullable=True)
    feedback = db.Column(db.Text, nullable=True)
    situation_score = db.Column(db.Float, nullable=True)
    task_score = db.Column(db.Float, nullable=True)
    action_score = db.Column(db.Float, nullable=True)
    result_score = db.Column(db.Float, nullable=True)

    @property
    def star_score(self):
        if self.situation_score is None:
            return None
        return StarScore(
            situation=self.situation_score,
            task=self.task_score,
            action=self.action_score,
            result=self.result_score,
        )

    @star_score.setter
    def star_score(self, score):
        self.situation_score = score.situation if score else None
        self.task_score = score.task if score else None
        self.action_score = score.action if score else None
        self.result_score = score.result if score else None

    def to_dict(self):
        score = self.star_score
        return {
            'id': self.id,
            'order': self.order,
            'text': self.text,
            'answer': self.answer,
            'feedback': self.feedback,
            'score': score.to_dict() if score else None,
        }

    def __repr__(self):
        return f'<Question {self.order} for Interview {self.interview_id}>'
