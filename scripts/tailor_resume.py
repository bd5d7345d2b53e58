#!/usr/bin/env python3
"""
Résumé tailoring CLI.

Runs the review workflow on document files (.json, .yaml, .yml): list the
changes a candidate suggests, merge an accepted subset, render a document as
text or HTML, and produce a candidate from a job description with an LLM.

Commands:
    changes  - List change items between an original and a candidate
    merge    - Apply accepted change items and write the merged document
    render   - Print a document as plain text, optionally export HTML
    optimize - Optimize a résumé for a job description (calls an LLM)

Usage:
    python scripts/tailor_resume.py changes resume.yaml candidate.json
    python scripts/tailor_resume.py merge resume.yaml candidate.json -o final.yaml --accept exp:0:exp-1-1
    python scripts/tailor_resume.py merge resume.yaml candidate.json -o final.yaml --accept-all
    python scripts/tailor_resume.py render final.yaml --preview 20 --html final.html
    python scripts/tailor_resume.py optimize resume.txt job.txt -o candidate.json --provider openai
"""

import os
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from tailor.contexts.document import (
    DocumentFormatError,
    load_document,
    preview_lines,
    render_resume_html,
    render_resume_text,
    save_document,
)
from tailor.contexts.document.logger import setup_document_logger
from tailor.contexts.optimizing import optimize_resume, parse_resume_text
from tailor.contexts.optimizing.logger import setup_optimizing_logger
from tailor.contexts.review import ReviewSession, build_change_set, group_change_items
from tailor.contexts.review.logger import setup_review_logger
from tailor.utils.llm import LLMResponseError, get_provider
from tailor.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

# Résumé inputs read as free text and parsed with the LLM
TEXT_SUFFIXES = {".txt", ".md"}

app = typer.Typer(
    add_completion=False,
    help="Review, merge and render tailored résumés",
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _fail(message: str) -> NoReturn:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _load_pair(original_path: Path, candidate_path: Path):
    """Load the original, then the candidate backfilled from it."""
    original = load_document(original_path)
    candidate = load_document(candidate_path, fallback=original)
    return original, candidate


@app.command("changes")
def changes_command(
    original_path: Annotated[
        Path, typer.Argument(help="Original résumé (.json/.yaml)", dir_okay=False)
    ],
    candidate_path: Annotated[
        Path, typer.Argument(help="Candidate résumé (.json/.yaml)", dir_okay=False)
    ],
    no_color: Annotated[
        bool, typer.Option("--no-color", help="Print plain before/after text without ANSI colors")
    ] = False,
):
    """
    List every change the candidate suggests, grouped by section.

    Each item shows its identity key (pass it to `merge --accept`) and a word
    diff of the before and after text.
    """
    setup_review_logger(LOGS_PATH / f"changes_{now()}", phase="changes")
    try:
        original, candidate = _load_pair(original_path, candidate_path)
    except (DocumentFormatError, FileNotFoundError) as e:
        _fail(str(e))

    items = build_change_set(original, candidate)
    if not items:
        typer.secho("No changes.", fg=typer.colors.GREEN)
        return

    typer.secho(f"\n{len(items)} change(s)", fg=typer.colors.BLUE, bold=True)
    for group, group_items in group_change_items(items).items():
        typer.secho(f"\n=== {group} ===", bold=True)
        for item in group_items:
            title = f" ({item.title})" if item.title and item.title != group else ""
            typer.echo(f"[{item.identity_key}]{title}")
            if no_color:
                typer.echo(f"  - {item.before_text}")
                typer.echo(f"  + {item.after_text}")
            else:
                diff = item.diff()
                typer.echo(f"  - {diff.before_ansi()}")
                typer.echo(f"  + {diff.after_ansi()}")


@app.command("merge")
def merge_command(
    original_path: Annotated[
        Path, typer.Argument(help="Original résumé (.json/.yaml)", dir_okay=False)
    ],
    candidate_path: Annotated[
        Path, typer.Argument(help="Candidate résumé (.json/.yaml)", dir_okay=False)
    ],
    output: Annotated[
        Path, typer.Option("--output", "-o", help="Merged document (.json/.yaml)", dir_okay=False)
    ],
    accept: Annotated[
        Optional[List[str]],
        typer.Option("--accept", "-a", help="Identity key of a change to accept (repeatable)"),
    ] = None,
    accept_all: Annotated[
        bool, typer.Option("--accept-all", help="Accept every change")
    ] = False,
):
    """
    Merge accepted changes onto the original and write the result.

    Examples:\n

        $ tailor_resume.py merge resume.yaml candidate.json -o final.yaml --accept skill:skill-2

        $ tailor_resume.py merge resume.yaml candidate.json -o final.yaml --accept-all
    """
    setup_review_logger(LOGS_PATH / f"merge_{now()}", phase="merge")
    try:
        original, candidate = _load_pair(original_path, candidate_path)
        session = ReviewSession(original, candidate)
        if accept_all:
            session.set_all(True)
        for key in accept or []:
            session.set_decision(key, True)
        save_document(session.merged(), output)
    except KeyError as e:
        _fail(e.args[0] if e.args else str(e))
    except (DocumentFormatError, FileNotFoundError) as e:
        _fail(str(e))

    typer.secho(
        f"✓ Applied {session.accepted_count}/{len(session.change_set)} change(s) -> {output}",
        fg=typer.colors.GREEN,
    )


@app.command("render")
def render_command(
    document_path: Annotated[
        Path, typer.Argument(help="Résumé document (.json/.yaml)", dir_okay=False)
    ],
    preview: Annotated[
        Optional[int], typer.Option("--preview", "-p", help="Print only the first N lines", min=1)
    ] = None,
    html: Annotated[
        Optional[Path], typer.Option("--html", help="Also write printable HTML to this file")
    ] = None,
):
    """Print a document as plain text and optionally export it as HTML."""
    setup_document_logger(LOGS_PATH / f"render_{now()}", phase="render")
    try:
        document = load_document(document_path)
    except (DocumentFormatError, FileNotFoundError) as e:
        _fail(str(e))

    text = render_resume_text(document)
    typer.echo(preview_lines(text, preview) if preview else text)

    if html:
        html.parent.mkdir(parents=True, exist_ok=True)
        html.write_text(render_resume_html(document), encoding="utf-8")
        typer.secho(f"✓ HTML written to {html}", fg=typer.colors.GREEN, err=True)


@app.command("optimize")
def optimize_command(
    resume_path: Annotated[
        Path,
        typer.Argument(help="Résumé: structured (.json/.yaml) or free text (.txt/.md)", dir_okay=False),
    ],
    job_description_path: Annotated[
        Path, typer.Argument(help="Job description text file", exists=True, dir_okay=False)
    ],
    output: Annotated[
        Path, typer.Option("--output", "-o", help="Candidate document (.json/.yaml)", dir_okay=False)
    ],
    original_output: Annotated[
        Optional[Path],
        typer.Option("--save-original", help="Also save the parsed original (for text résumés)"),
    ] = None,
    provider: Annotated[
        Optional[str], typer.Option("--provider", help="LLM provider: openai or anthropic")
    ] = None,
    model: Annotated[Optional[str], typer.Option("--model", help="Model name")] = None,
):
    """
    Optimize a résumé for a job description and write the candidate.

    Review the result with `changes` and apply it with `merge`.
    """
    try:
        llm = get_provider(provider_name=provider, model=model)
        setup_optimizing_logger(LOGS_PATH / f"optimize_{now()}", provider_name=llm.name)

        if resume_path.suffix.lower() in TEXT_SUFFIXES:
            if not resume_path.exists():
                raise FileNotFoundError(f"Résumé not found: {resume_path}")
            original = parse_resume_text(resume_path.read_text(encoding="utf-8"), llm)
        else:
            original = load_document(resume_path)

        job_description = job_description_path.read_text(encoding="utf-8")
        result = optimize_resume(original, job_description, llm)

        save_document(result.candidate, output)
        if original_output:
            save_document(original, original_output)
    except (DocumentFormatError, LLMResponseError, ValueError, FileNotFoundError) as e:
        _fail(str(e))

    report = result.report
    typer.secho(f"\nTailored for {report.role_title}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"  Match score: {report.match_score}% ({report.grade})")
    typer.echo(f"  Matched: {', '.join(report.matched) or '-'}")
    typer.echo(f"  Missing: {', '.join(report.missing) or '-'}")
    for note in report.issues:
        typer.echo(f"  • {note}")
    typer.secho(f"\n✓ Candidate written to {output}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
