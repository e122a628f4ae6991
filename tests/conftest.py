import os
import sys
import pytest
import fakeredis

# Ensure repo root is on sys.path so tests can import top-level modules (e.g., interview_logic.py)
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# Ensure env for create_app
os.environ.setdefault('DATABASE_URL', 'sqlite:///:memory:')
os.environ.setdefault('REDIS_URL', 'redis://localhost:6379/0')
os.environ.setdefault('OPENAI_API_KEY', 'sk-test-key')
os.environ.setdefault('VECTOR_DATABASE_ID', 'vs_test')

FIVE_QUESTIONS = "\n".join(f"Tell me about a time you handled challenge {i}?" for i in range(1, 6))


class StubCompletionClient:
    """Deterministic stand-in for the completion endpoint.

    Picks a canned reply by looking at the prompt. Any reply may be an
    exception instance, which is raised instead of returned.
    """

    def __init__(self, questions=FIVE_QUESTIONS, feedback='Good structure, quantify the result.',
                 scores='0.8,0.7,0.9,0.6'):
        self.questions = questions
        self.feedback = feedback
        self.scores = scores
        self.prompts = []

    def complete(self, prompt):
        self.prompts.append(prompt)
        if prompt.startswith('Generate'):
            reply = self.questions
        elif 'Score each component' in prompt:
            reply = self.scores
        else:
            reply = self.feedback
        if isinstance(reply, Exception):
            raise reply
        return reply

    def kinds(self):
        """Sequence of 'questions' / 'feedback' / 'scores' for the prompts seen so far."""
        out = []
        for p in self.prompts:
            if p.startswith('Generate'):
                out.append('questions')
            elif 'Score each component' in p:
                out.append('scores')
            else:
                out.append('feedback')
        return out


@pytest.fixture(scope='session')
def fake_redis_server():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture(autouse=True)
def patch_redis(monkeypatch, fake_redis_server):
    import redis
    monkeypatch.setattr(redis, 'from_url', lambda *args, **kwargs: fake_redis_server)
    yield


@pytest.fixture()
def stub_client():
    return StubCompletionClient()


@pytest.fixture()
def app(stub_client):
    from app import create_app
    application = create_app(completion_client=stub_client)
    application.config.update(TESTING=True)
    return application


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def db_session(app):
    from extensions import db
    with app.app_context():
        yield db.session


@pytest.fixture()
def candidate(db_session):
    from models import Candidate
    c = Candidate(
        name='Ann',
        resume='Led a team of five engineers on a payments platform.',
        job_description='Engineering manager for a growing fintech team.',
        company_name='Acme',
    )
    db_session.add(c)
    db_session.commit()
    return c
