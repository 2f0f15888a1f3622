"""CLI interface for IssueTwin duplicate issue detection."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .bot import check_issue
from .config import DuplicateSettings, IssueTwinConfig, SettingsError
from .dictionaries import Dictionaries, load_dictionaries, save_default_dictionaries
from .distance import distance as edit_distance
from .errors import DictionaryError
from .github import GitHubClient, GitHubError
from .normalize import normalize as normalize_phrase
from .policy import is_duplicate
from .similarity import compare_detailed

console = Console()
app = typer.Typer(
    name="issuetwin",
    help="Detect duplicate issues by comparing their titles.",
    add_completion=False,
)


def _load_dictionaries(path: Path | None) -> Dictionaries:
    try:
        return load_dictionaries(path)
    except DictionaryError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1) from None


def _load_settings(config: IssueTwinConfig, settings_file: Path | None) -> DuplicateSettings:
    try:
        if settings_file is not None:
            return DuplicateSettings.from_yaml(settings_file)
        return config.load_settings()
    except SettingsError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1) from None


DictionariesOption = Annotated[
    Path | None,
    typer.Option(
        "--dictionaries",
        "-d",
        help="Path to custom dictionaries YAML file",
        exists=True,
        dir_okay=False,
    ),
]

SettingsOption = Annotated[
    Path | None,
    typer.Option(
        "--settings",
        "-s",
        help="Path to duplicate-detection settings YAML (default: .github/issuetwin.yml)",
        exists=True,
        dir_okay=False,
    ),
]


@app.command()
def normalize(
    text: Annotated[str, typer.Argument(help="Phrase to normalize")],
    dictionaries: DictionariesOption = None,
) -> None:
    """Show a phrase after normalization."""
    config = IssueTwinConfig.load()
    dicts = _load_dictionaries(dictionaries or config.dictionaries_path)
    console.print(normalize_phrase(text, dicts), markup=False, highlight=False)


@app.command()
def distance(
    a: Annotated[str, typer.Argument(help="First word")],
    b: Annotated[str, typer.Argument(help="Second word")],
) -> None:
    """Show the Damerau-Levenshtein distance between two strings."""
    console.print(edit_distance(a, b))


@app.command()
def compare(
    phrase_a: Annotated[str, typer.Argument(help="First phrase")],
    phrase_b: Annotated[str, typer.Argument(help="Second phrase")],
    threshold: Annotated[
        float | None,
        typer.Option(
            "--threshold",
            "-t",
            min=0.0,
            max=1.0,
            help="Score at or above which phrases count as duplicates",
        ),
    ] = None,
    explain: Annotated[
        bool,
        typer.Option(
            "--explain",
            help="Show per-word matches",
        ),
    ] = False,
    dictionaries: DictionariesOption = None,
    settings_file: SettingsOption = None,
) -> None:
    """
    Compare two phrases and report whether they look like duplicates.

    Exits with status 0 for duplicates and 2 otherwise, so the command can be
    used in scripts.
    """
    config = IssueTwinConfig.load()
    dicts = _load_dictionaries(dictionaries or config.dictionaries_path)
    settings = _load_settings(config, settings_file)
    if threshold is None:
        threshold = settings.threshold

    result = compare_detailed(phrase_a, phrase_b, dictionaries=dicts, error_adj=settings.error_adj)

    if explain:
        table = Table(title="Word Matches")
        table.add_column("Word", style="cyan")
        table.add_column("Best match")
        table.add_column("Similarity", justify="right")
        for match in result.matches + result.reverse_matches:
            table.add_row(match.token, match.match, f"{match.score:.2f}")
        console.print(table)
        if result.reverse_matches:
            console.print("[dim]Equal word counts: both directions are matched and averaged[/]")
        console.print(f"[dim]Direct score: {result.direct_score:.3f}[/]")
        console.print(f"[dim]Length penalty: -{result.penalty:.3f}[/]")
        if result.degenerate:
            console.print("[yellow]A phrase has no comparable words after normalization[/]")

    duplicate = is_duplicate(result.score, threshold)
    verdict = "[yellow]duplicate[/]" if duplicate else "[green]not a duplicate[/]"
    console.print(f"[bold]Score:[/] {result.score:.3f} ({result.accuracy}%) - {verdict}")

    if not duplicate:
        raise typer.Exit(2)


@app.command()
def check(
    repo: Annotated[str, typer.Argument(help="Repository as owner/name")],
    number: Annotated[int, typer.Argument(help="Issue number to check")],
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Only report duplicates, do not label or comment",
        ),
    ] = False,
    dictionaries: DictionariesOption = None,
    settings_file: SettingsOption = None,
) -> None:
    """Check one issue against the repository's open issues."""
    config = IssueTwinConfig.load()
    dicts = _load_dictionaries(dictionaries or config.dictionaries_path)
    settings = _load_settings(config, settings_file)

    if not config.github_token:
        console.print("[yellow]Warning: GITHUB_TOKEN not set, requests are unauthenticated[/]")

    try:
        with GitHubClient(config) as client:
            others = client.list_open_issues(repo)
            issue = next((i for i in others if i.number == number), None)
            if issue is None:
                console.print(f"[red]Error:[/] #{number} is not an open issue in {repo}")
                raise typer.Exit(1)
            matches = check_issue(
                client, repo, issue, settings, dicts, dry_run=dry_run, candidates=others
            )
    except (GitHubError, ValueError) as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1) from None

    if matches:
        table = Table(title=f"Potential duplicates of #{number}")
        table.add_column("Issue", style="cyan")
        table.add_column("Title")
        table.add_column("Accuracy", justify="right")
        for match in matches:
            table.add_row(f"#{match.issue.number}", match.issue.title, f"{match.accuracy}%")
        console.print(table)


@app.command()
def serve(
    host: Annotated[str, typer.Option("--host", help="Interface to bind")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", "-p", help="Port to listen on")] = 8000,
    dictionaries: DictionariesOption = None,
    settings_file: SettingsOption = None,
) -> None:
    """Run the GitHub webhook server."""
    import uvicorn

    from .webhook import create_webhook_app

    config = IssueTwinConfig.load()
    dicts = _load_dictionaries(dictionaries or config.dictionaries_path)
    settings = _load_settings(config, settings_file)

    if not config.webhook_secret:
        console.print("[yellow]Warning: no webhook secret configured, signatures are not checked[/]")

    console.print(f"[blue]Listening on[/] http://{host}:{port}/webhook")
    uvicorn.run(create_webhook_app(config, settings, dicts), host=host, port=port)


@app.command()
def config(
    show: Annotated[
        bool,
        typer.Option(
            "--show",
            help="Show current configuration",
        ),
    ] = False,
    init: Annotated[
        bool,
        typer.Option(
            "--init",
            help="Create default config file",
        ),
    ] = False,
    init_dictionaries: Annotated[
        bool,
        typer.Option(
            "--init-dictionaries",
            help="Create dictionaries.yaml in current directory for customization",
        ),
    ] = False,
) -> None:
    """
    Manage IssueTwin configuration.

    Config is stored in ~/.config/issuetwin/config.env
    """
    cfg = IssueTwinConfig.load()

    if init:
        path = cfg.save_default_config()
        console.print(f"[green]Config created:[/] {path}")
        console.print("[dim]Edit this file to customize settings[/]")
        return

    if init_dictionaries:
        dictionaries_path = Path.cwd() / "dictionaries.yaml"
        if dictionaries_path.exists():
            console.print(f"[yellow]Dictionaries file already exists:[/] {dictionaries_path}")
            console.print("[dim]Delete it first if you want to reset to defaults[/]")
            return
        save_default_dictionaries(dictionaries_path)
        console.print("[dim]Edit this file and set ISSUETWIN_DICTIONARIES to use it[/]")
        return

    if show:
        settings = _load_settings(cfg, None)
        console.print("[bold]Current Configuration:[/]\n")
        console.print(f"API Base: {cfg.api_base}")
        console.print(
            f"GitHub Token: {'*' * 20 + cfg.github_token[-4:] if cfg.github_token else '[red]NOT SET[/]'}"
        )
        console.print(f"Webhook Secret: {'set' if cfg.webhook_secret else 'not set'}")
        console.print(f"Settings File: {cfg.settings_path}")
        console.print(f"Dictionaries: {cfg.dictionaries_path or 'embedded defaults'}")
        console.print(f"Label: {settings.issue_label} ({settings.label_color})")
        console.print(f"Threshold: {settings.threshold}")
        return

    # Default: show help
    console.print(
        "Use --show to view config, --init to create, "
        "or --init-dictionaries for custom dictionaries"
    )


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]IssueTwin v{__version__}[/]")


if __name__ == "__main__":
    app()
