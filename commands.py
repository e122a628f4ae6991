import click
from flask.cli import with_appcontext

from models import Interview


def init_app(app, db):
    """Registers the maintenance commands on the Flask CLI."""

    @app.cli.command('init-db')
    @with_appcontext
    def init_db():
        """Create all tables defined in models.py. Existing tables are kept."""
        click.echo("Initializing database and creating tables...")
        db.create_all()
        click.echo("Database tables created successfully!")

    @app.cli.command('show-interviews')
    @with_appcontext
    def show_interviews():
        """Print every stored interview with its per-question STAR scores."""
        click.echo("--- Querying Database ---")
        interviews = Interview.query.order_by(Interview.id).all()

        if not interviews:
            click.echo("No interviews found in the database.")
            return

        click.echo(f"Found {len(interviews)} interview(s).\n")
        for interview in interviews:
            click.echo(f"Interview ID: {interview.id}")
            click.echo(f"  Candidate: {interview.candidate.name} ({interview.candidate.company_name})")
            if interview.overall_score is not None:
                click.echo(f"  Overall Score: {interview.overall_score:.2f}")
            else:
                click.echo("  Overall Score: pending")
            click.echo(f"  Started: {interview.start_time}")
            click.echo("  Questions:")
            for question in interview.questions:
                click.echo(f"    - Q{question.order + 1}: {question.text[:60]}")
                click.echo(f"      A: {(question.answer or '')[:60]}")
                score = question.star_score
                if score:
                    click.echo(f"      STAR: {score.situation:.2f}/{score.task:.2f}/{score.action:.2f}/{score.result:.2f}")
            click.echo("-------------------------")
