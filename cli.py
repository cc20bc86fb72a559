import typer
from rich.console import Console
from rich.table import Table
from loguru import logger
from typing import Optional
from datetime import datetime
import json
import sys

from studynow.config import settings
from studynow.database import SessionLocal, init_db
from studynow.crud import (
    create_user, get_user, list_users,
    create_subject, get_subject, get_subjects, update_subject, delete_subject,
    create_topic, get_topics, update_topic, delete_topic,
    get_preferences, update_preferences, get_review_logs
)
from studynow.exceptions import StudyNowError, UserNotFoundError, SubjectNotFoundError, TopicNotFoundError
from studynow.repository import SqlStudyRepository
from studynow.scheduler import get_study_schedule, review_topic
from studynow.schemas import (
    Difficulty, Preferences, PreferencesUpdate, SubjectCreate, SubjectUpdate,
    TopicCreate, TopicUpdate, UserCreate
)
from studynow.timeutils import to_naive_utc, utcnow

app = typer.Typer(help="StudyNow CLI - spaced repetition study planning with exam-aware daily schedules")
console = Console()
err_console = Console(stderr=True)

DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M", "%d/%m/%Y"]

def parse_instant(value: Optional[str]) -> Optional[datetime]:
    """Parse a date/time option; ISO 8601 with offset is accepted too"""
    if not value:
        return None
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    try:
        return to_naive_utc(datetime.fromisoformat(value))
    except ValueError:
        raise typer.BadParameter(f"Unrecognised date '{value}', use YYYY-MM-DD")

def fail(message: str):
    console.print(f"[red]✗[/red] {message}")
    raise typer.Exit(code=1)

def require_user(db, user_id: int):
    user = get_user(db, user_id)
    if not user:
        raise UserNotFoundError(user_id)
    return user

def require_subject(db, user_id: int, subject_id: int):
    subject = get_subject(db, user_id, subject_id)
    if not subject:
        raise SubjectNotFoundError(subject_id, user_id)
    return subject

def format_instant(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else "-"

@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging")):
    """Configure logging for every command"""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else settings.log_level)

@app.command()
def init():
    """Initialize database tables"""
    init_db()
    console.print("[green]✓[/green] Database initialized successfully!")

@app.command()
def reset_db(yes: bool = typer.Option(False, "--yes", help="Skip confirmation")):
    """Delete all data and reinitialize database (WARNING: irreversible!)"""
    if not yes and not typer.confirm("⚠️  This will DELETE ALL DATA. Are you sure?"):
        console.print("[yellow]Cancelled.[/yellow]")
        return

    from studynow.database import engine, Base
    console.print("[yellow]Dropping all tables...[/yellow]")
    Base.metadata.drop_all(bind=engine)
    console.print("[yellow]Recreating tables...[/yellow]")
    init_db()
    console.print("[green]✓[/green] Database reset complete! All data deleted.")

@app.command("create-user")
def create_user_cmd(
    name: str = typer.Option(..., prompt="Name"),
    email: Optional[str] = typer.Option(None, help="Email address for reminders")
):
    """Create a new user"""
    db = SessionLocal()
    try:
        user = create_user(db, UserCreate(name=name, email=email))
        console.print(f"[green]✓[/green] User created successfully! User ID: {user.id}")
    finally:
        db.close()

@app.command("list-users")
def list_users_cmd():
    """List all users"""
    db = SessionLocal()
    try:
        users = list_users(db)
        if not users:
            console.print("[yellow]No users yet. Run create-user first.[/yellow]")
            return
        for user in users:
            console.print(f"  {user.id}. {user.name}" + (f" <{user.email}>" if user.email else ""))
    finally:
        db.close()

@app.command()
def add_subject(
    user_id: int = typer.Option(..., prompt="User ID"),
    name: str = typer.Option(..., prompt="Subject name"),
    exam_date: Optional[str] = typer.Option(None, help="Exam date (YYYY-MM-DD)")
):
    """Add a subject, optionally with an exam date"""
    db = SessionLocal()
    try:
        require_user(db, user_id)
        subject = create_subject(db, user_id, SubjectCreate(name=name, exam_date=parse_instant(exam_date)))
        console.print(f"[green]✓[/green] Subject added! ID: {subject.id}")
        console.print(f"  Exam: {format_instant(subject.exam_date)}")
    except StudyNowError as e:
        fail(str(e))
    finally:
        db.close()

@app.command()
def list_subjects(user_id: int):
    """List subjects with their exam dates and topic counts"""
    db = SessionLocal()
    try:
        require_user(db, user_id)
        subjects = get_subjects(db, user_id)
        if not subjects:
            console.print(f"[yellow]No subjects found for user {user_id}[/yellow]")
            return

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("ID", style="cyan", justify="right")
        table.add_column("Subject", style="green")
        table.add_column("Exam Date", style="yellow")
        table.add_column("Topics", style="blue", justify="right")

        for subject in subjects:
            table.add_row(str(subject.id), subject.name, format_instant(subject.exam_date), str(len(subject.topics)))

        console.print(table)
    except StudyNowError as e:
        fail(str(e))
    finally:
        db.close()

@app.command("update-subject")
def update_subject_cmd(
    user_id: int = typer.Option(..., prompt="User ID"),
    subject_id: int = typer.Option(..., prompt="Subject ID"),
    name: Optional[str] = typer.Option(None, help="New name"),
    exam_date: Optional[str] = typer.Option(None, help="New exam date (YYYY-MM-DD)"),
    clear_exam_date: bool = typer.Option(False, "--clear-exam-date", help="Remove the exam date")
):
    """Rename a subject or change its exam date"""
    db = SessionLocal()
    try:
        changes = SubjectUpdate(name=name, exam_date=parse_instant(exam_date), clear_exam_date=clear_exam_date)
        subject = update_subject(db, user_id, subject_id, changes)
        if not subject:
            raise SubjectNotFoundError(subject_id, user_id)
        console.print(f"[green]✓[/green] Subject updated: {subject.name} (exam: {format_instant(subject.exam_date)})")
    except StudyNowError as e:
        fail(str(e))
    finally:
        db.close()

@app.command("delete-subject")
def delete_subject_cmd(
    user_id: int = typer.Option(..., prompt="User ID"),
    subject_id: int = typer.Option(..., prompt="Subject ID"),
    yes: bool = typer.Option(False, "--yes", help="Skip confirmation")
):
    """Delete a subject and all of its topics"""
    if not yes and not typer.confirm("All topics of this subject will be deleted too. Continue?"):
        console.print("[yellow]Cancelled.[/yellow]")
        return
    db = SessionLocal()
    try:
        if not delete_subject(db, user_id, subject_id):
            raise SubjectNotFoundError(subject_id, user_id)
        console.print(f"[green]✓[/green] Subject {subject_id} deleted")
    except StudyNowError as e:
        fail(str(e))
    finally:
        db.close()

@app.command()
def add_topic(
    user_id: int = typer.Option(..., prompt="User ID"),
    subject_id: int = typer.Option(..., prompt="Subject ID"),
    name: str = typer.Option(..., prompt="Topic name"),
    difficulty: Difficulty = typer.Option(Difficulty.MEDIUM, help="easy, medium or hard")
):
    """Add a topic to a subject; new topics are due immediately"""
    db = SessionLocal()
    try:
        require_subject(db, user_id, subject_id)
        topic = create_topic(db, user_id, TopicCreate(subject_id=subject_id, name=name, difficulty=difficulty))
        console.print(f"[green]✓[/green] Topic added! ID: {topic.id}")
        console.print(f"  Difficulty: {topic.difficulty}")
    except StudyNowError as e:
        fail(str(e))
    finally:
        db.close()

@app.command()
def list_topics(
    user_id: int,
    subject_id: Optional[int] = typer.Option(None, help="Only topics of this subject")
):
    """List topics with their review state"""
    db = SessionLocal()
    try:
        require_user(db, user_id)
        topics = get_topics(db, user_id, subject_id)
        if not topics:
            console.print(f"[yellow]No topics found for user {user_id}[/yellow]")
            return

        now = utcnow()
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("ID", style="cyan", justify="right")
        table.add_column("Subject", style="green")
        table.add_column("Topic", style="green")
        table.add_column("Difficulty")
        table.add_column("Status", style="yellow")
        table.add_column("Reviews", justify="right")
        table.add_column("Next Due", style="blue")

        for topic in topics:
            due = "[red]now[/red]" if topic.last_reviewed_at is None or topic.next_due_at <= now else format_instant(topic.next_due_at)
            table.add_row(
                str(topic.id),
                topic.subject.name,
                topic.name[:50],
                topic.difficulty,
                topic.status,
                str(topic.review_count),
                due
            )

        console.print(table)
    except StudyNowError as e:
        fail(str(e))
    finally:
        db.close()

@app.command("update-topic")
def update_topic_cmd(
    user_id: int = typer.Option(..., prompt="User ID"),
    topic_id: int = typer.Option(..., prompt="Topic ID"),
    name: Optional[str] = typer.Option(None, help="New name"),
    difficulty: Optional[Difficulty] = typer.Option(None, help="easy, medium or hard"),
    subject_id: Optional[int] = typer.Option(None, help="Move the topic to another subject")
):
    """Rename, re-grade or move a topic (review history is kept)"""
    db = SessionLocal()
    try:
        if subject_id is not None:
            require_subject(db, user_id, subject_id)
        topic = update_topic(db, user_id, topic_id, TopicUpdate(name=name, difficulty=difficulty, subject_id=subject_id))
        if not topic:
            raise TopicNotFoundError(topic_id, user_id)
        console.print(f"[green]✓[/green] Topic updated: {topic.name} in {topic.subject.name} ({topic.difficulty})")
    except StudyNowError as e:
        fail(str(e))
    finally:
        db.close()

@app.command("delete-topic")
def delete_topic_cmd(
    user_id: int = typer.Option(..., prompt="User ID"),
    topic_id: int = typer.Option(..., prompt="Topic ID")
):
    """Delete a topic"""
    db = SessionLocal()
    try:
        if not delete_topic(db, user_id, topic_id):
            raise TopicNotFoundError(topic_id, user_id)
        console.print(f"[green]✓[/green] Topic {topic_id} deleted")
    except StudyNowError as e:
        fail(str(e))
    finally:
        db.close()

@app.command()
def set_preferences(
    user_id: int = typer.Option(..., prompt="User ID"),
    goal: Optional[str] = typer.Option(None, help="Daily study goal, e.g. 90 or '2 hours'"),
    weight: Optional[str] = typer.Option(None, help="balanced, hard-focus or easy-focus"),
    frequency: Optional[str] = typer.Option(None, help="standard, frequent or intensive"),
    reminder_time: Optional[str] = typer.Option(None, help="Reminder time (HH:MM)")
):
    """Update study preferences"""
    db = SessionLocal()
    try:
        require_user(db, user_id)
        changes = PreferencesUpdate(
            daily_study_goal_minutes=goal,
            topic_priority_weight=weight,
            review_frequency=frequency,
            reminder_time=reminder_time
        )
        prefs = Preferences.model_validate(update_preferences(db, user_id, changes))
        console.print(f"[green]✓[/green] Preferences updated!")
        show_preferences(prefs)
    except StudyNowError as e:
        fail(str(e))
    finally:
        db.close()

@app.command()
def view_preferences(user_id: int):
    """View study preferences (defaults if never set)"""
    db = SessionLocal()
    try:
        require_user(db, user_id)
        db_prefs = get_preferences(db, user_id)
        prefs = Preferences.model_validate(db_prefs) if db_prefs else Preferences()
        console.print("\n[bold]Study Preferences[/bold]")
        show_preferences(prefs)
    except StudyNowError as e:
        fail(str(e))
    finally:
        db.close()

def show_preferences(prefs: Preferences):
    console.print(f"  Daily goal: {prefs.daily_study_goal_minutes} minutes")
    console.print(f"  Topic priority: {prefs.topic_priority_weight.value}")
    console.print(f"  Review frequency: {prefs.review_frequency.value}")
    console.print(f"  Reminder time: {prefs.reminder_time}")

@app.command()
def review(
    user_id: int = typer.Option(..., prompt="User ID"),
    topic_id: int = typer.Option(..., prompt="Topic ID"),
    at: Optional[str] = typer.Option(None, help="Review time (YYYY-MM-DD), default: now")
):
    """Mark a topic as reviewed and schedule its next review"""
    db = SessionLocal()
    try:
        now = parse_instant(at) or utcnow()
        topic = review_topic(SqlStudyRepository(db), user_id, topic_id, now)

        console.print(f"[green]✓[/green] Review recorded for {topic.name}")
        console.print(f"  Reviews: {topic.review_count} ({topic.status.value})")
        console.print(f"  Next review: {format_instant(topic.next_due_at)}")
    except StudyNowError as e:
        fail(str(e))
    finally:
        db.close()

@app.command()
def history(
    user_id: int,
    topic_id: Optional[int] = typer.Option(None, help="Only reviews of this topic"),
    limit: int = typer.Option(20, help="Number of reviews to show")
):
    """Show recent reviews"""
    db = SessionLocal()
    try:
        require_user(db, user_id)
        logs = get_review_logs(db, user_id, topic_id, limit=limit)
        if not logs:
            console.print(f"[yellow]No reviews recorded yet[/yellow]")
            return

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Reviewed", style="cyan")
        table.add_column("Topic", style="green")
        table.add_column("Review #", justify="right")
        table.add_column("Interval", justify="right")
        table.add_column("Next Due", style="blue")

        for log in logs:
            table.add_row(
                format_instant(log.reviewed_at),
                log.topic.name[:40],
                str(log.review_count),
                f"{log.interval_days} d",
                format_instant(log.next_due_at)
            )

        console.print(table)
    except StudyNowError as e:
        fail(str(e))
    finally:
        db.close()

@app.command()
def schedule(
    user_id: int,
    now: Optional[str] = typer.Option(None, help="Plan as of this time (YYYY-MM-DD), default: now"),
    as_json: bool = typer.Option(False, "--json", help="Print the schedule as JSON")
):
    """Generate today's study schedule"""
    db = SessionLocal()
    try:
        require_user(db, user_id)
        result = get_study_schedule(SqlStudyRepository(db), user_id, parse_instant(now) or utcnow())

        for issue in result.integrity_issues:
            err_console.print(f"[red]✗[/red] {issue.message} (skipped)", highlight=False)

        if as_json:
            typer.echo(json.dumps(result.to_json(), indent=2))
            return

        if not result.entries:
            console.print("[green]Nothing to study right now.[/green]")
            return

        topics = {topic.id: topic for topic in get_topics(db, user_id)}

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("#", justify="right")
        table.add_column("Subject", style="green")
        table.add_column("Topic", style="yellow")
        table.add_column("Why", style="cyan")
        table.add_column("Minutes", style="blue", justify="right")
        table.add_column("Score", justify="right")

        for position, entry in enumerate(result.entries, 1):
            topic = topics[entry.topic_id]
            table.add_row(
                str(position),
                topic.subject.name,
                topic.name[:40],
                entry.due_reason.value,
                str(entry.allocated_minutes),
                f"{entry.priority_score:.2f}"
            )

        console.print(table)
        console.print(f"\n[bold]Total:[/bold] {result.total_minutes} minutes")
    except StudyNowError as e:
        fail(str(e))
    finally:
        db.close()

if __name__ == "__main__":
    app()
