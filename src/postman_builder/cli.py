"""CLI entry point for postman-builder."""

import logging
from pathlib import Path

import click

from postman_builder.builder import PostmanBuilder
from postman_builder.config import BuilderOptions, load_options
from postman_builder.exceptions import BuilderError
from postman_builder.parser.base import bearer_auth
from postman_builder.parser.endpoints import parse_endpoints


def _load(
    doc_path: Path,
    config: Path,
    bearer: str | None,
    debug: bool,
    no_comments: bool,
    **overrides,
) -> PostmanBuilder:
    """Load options and endpoints, and compile them into a builder."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    options = load_options(
        config,
        debug=debug or None,
        comments_in_json=False if no_comments else None,
        **overrides,
    )
    if bearer:
        options = _with_bearer(options, bearer)

    click.echo(f"Parsing {doc_path}...")
    endpoints = parse_endpoints(doc_path)
    click.echo(f"Found {len(endpoints)} endpoints.")

    builder = PostmanBuilder(options)
    builder.add_endpoints(endpoints)
    return builder


def _with_bearer(options: BuilderOptions, token: str) -> BuilderOptions:
    auth = bearer_auth(token)
    return options.model_copy(update={"authorization": lambda endpoint: auth})


def build_options(func):
    """Options shared by every command that compiles a collection."""
    decorators = [
        click.argument("doc_path", type=click.Path(exists=True, path_type=Path)),
        click.option("-c", "--config", required=True, type=click.Path(exists=True, path_type=Path), help="Builder config YAML."),
        click.option("-o", "--collection", type=click.Path(path_type=Path), default=None, help="Collection output file."),
        click.option("-e", "--environment", type=click.Path(path_type=Path), default=None, help="Environment output file."),
        click.option("--max-folders", type=click.IntRange(min=0), default=None, help="Path segments used as folders."),
        click.option("--no-comments", is_flag=True, default=False, help="Omit inline comments from JSON bodies."),
        click.option("--bearer", default=None, help="Bearer token for every request, e.g. '{{accessKey}}'."),
        click.option("--debug", is_flag=True, default=False, help="Trace the compile phase."),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


@click.group()
def main():
    """Postman Builder: compile endpoint descriptors into Postman collections."""
    pass


@main.command()
@build_options
def build(doc_path: Path, config: Path, bearer: str | None, debug: bool, no_comments: bool, **overrides):
    """Compile endpoints and write the collection and environment files."""
    try:
        builder = _load(doc_path, config, bearer, debug, no_comments, **overrides)
        written = builder.generate()
    except (BuilderError, OSError) as e:
        raise click.ClickException(str(e)) from e

    files = builder.options.files
    if not written:
        click.echo(f"Collection {files.collection} is unchanged.")
        return
    click.echo(f"Collection saved to {files.collection}")
    click.echo(f"Environment saved to {files.environment}")


@main.command()
@build_options
@click.option("--api-key", "api_keys", multiple=True, envvar="POSTMAN_API_KEY", help="Postman API key (repeatable).")
def send(
    doc_path: Path,
    config: Path,
    bearer: str | None,
    debug: bool,
    no_comments: bool,
    api_keys: tuple[str, ...],
    **overrides,
):
    """Compile endpoints, write the files and upload the collection."""
    try:
        builder = _load(doc_path, config, bearer, debug, no_comments, api_keys=list(api_keys) or None, **overrides)
        report = builder.generate_and_send()
    except (BuilderError, OSError) as e:
        raise click.ClickException(str(e)) from e

    if report is None:
        click.echo(f"Collection {builder.options.files.collection} is unchanged, nothing uploaded.")
        return

    for result in report.results:
        if result.ok:
            click.echo(f"  Uploaded with key {result.key}")
        else:
            click.echo(f"  Upload with key {result.key} failed: {result.error}")

    if not report.ok:
        raise click.ClickException(f"{len(report.failures)} of {len(report.results)} uploads failed.")
    click.echo(f"Uploaded to {len(report.results)} workspace(s).")
