from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import requests
import typer

from wordstats.analyze.processor import normalize_token
from wordstats.core.config import AppConfig, load_app_config
from wordstats.core.errors import ConfigError
from wordstats.dispatch.runner import format_results, run_all
from wordstats.fetch.http import BASE_PATH, HOST, PORT
from wordstats.infra.logging import init_logging
from wordstats.lexicon.dictionary import check_word, load_dictionary

app = typer.Typer(help="wordstats: count words and English words in files served over HTTP")


def _echo(s: str) -> None:
    typer.echo(s)


def _load_config(config: Optional[Path], **overrides: object) -> AppConfig:
    try:
        return load_app_config(config, overrides)
    except ConfigError as e:
        typer.secho(f"Invalid configuration: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)


@app.command()
def count(
    files: List[str] = typer.Argument(..., help="File names to fetch, e.g. cpp.txt"),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", min=0, help="Socket timeout in seconds; 0 waits forever"
    ),
    max_workers: Optional[int] = typer.Option(
        None, "--max-workers", min=1, help="Bound the thread pool (default: one per file)"
    ),
    dictionary: Optional[Path] = typer.Option(None, "--dictionary", help="Word list, one per line"),
    strict: bool = typer.Option(False, "--strict", help="Exit 1 if any file failed"),
    config: Optional[Path] = typer.Option(None, "--config", exists=True, dir_okay=False, readable=True),
) -> None:
    """Fetch every file concurrently and print its word statistics in input order."""
    init_logging()
    cfg = _load_config(
        config,
        timeout=timeout,
        max_workers=max_workers,
        dictionary_path=str(dictionary) if dictionary else None,
    )
    words = load_dictionary(cfg.dictionary_path)
    results = run_all(files, words, cfg)
    for line in format_results(results):
        _echo(line)
    if strict and any(not r.success for r in results):
        raise typer.Exit(code=1)


@app.command()
def check(
    words: List[str] = typer.Argument(..., help="Words to look up"),
    dictionary: Optional[Path] = typer.Option(None, "--dictionary", help="Word list, one per line"),
    config: Optional[Path] = typer.Option(None, "--config", exists=True, dir_okay=False, readable=True),
) -> None:
    """Normalize each word like response text and report dictionary membership."""
    init_logging()
    cfg = _load_config(config, dictionary_path=str(dictionary) if dictionary else None)
    d = load_dictionary(cfg.dictionary_path)
    for raw in words:
        for token in normalize_token(raw) or [raw]:
            _echo(f"{token}: {'yes' if check_word(token, d) else 'no'}")


@app.command()
def doctor(
    config: Optional[Path] = typer.Option(None, "--config", exists=True, dir_okay=False, readable=True),
) -> None:
    """Check the dictionary and whether the fixed host answers HTTP."""
    init_logging()
    ok = True
    cfg = _load_config(config)

    d = load_dictionary(cfg.dictionary_path)
    if len(d) == 0:
        ok = False
        typer.secho(
            f"Dictionary {cfg.dictionary_path} is missing or empty", fg=typer.colors.YELLOW
        )
    else:
        _echo(f"Dictionary: {len(d)} words from {cfg.dictionary_path}")

    # Any HTTP response, even 4xx/5xx, counts as reachable
    url = f"http://{HOST}:{PORT}{BASE_PATH}"
    try:
        r = requests.get(url, timeout=cfg.timeout or 5)
        _echo(f"Host reachable: {r.status_code}")
    except requests.RequestException as e:
        ok = False
        typer.secho(f"Host unreachable: {e}", fg=typer.colors.RED)

    if ok:
        typer.secho("Health check passed", fg=typer.colors.GREEN)
    else:
        typer.secho("Health check failed; see messages above", fg=typer.colors.RED)
        raise typer.Exit(code=1)


def main() -> None:  # console_scripts entrypoint wrapper
    app()


if __name__ == "__main__":
    main()
