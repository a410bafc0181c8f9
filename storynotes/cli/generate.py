"""Generate command implementation."""

import sys
from pathlib import Path

import click

from ..config import get_app_config, get_settings
from ..errors import StorynotesError
from ..releasenote import FilterConfig, ReleaseSnapshot, StoryResolver, build_release
from ..shortcut import ShortcutClient
from ..template import FileTemplate


def print_summary(snapshot: ReleaseSnapshot) -> None:
    """Print story, epic and unparsed commit counts."""
    def header(text):
        return click.style(text, bold=True)

    click.echo(f"{header('Total stories')}: {click.style(str(len(snapshot.stories)), fg='green')}")
    click.echo(f"\n{header('Total epics')}: {click.style(str(len(snapshot.epics)), fg='green')}")
    for repo, commits in snapshot.unparsed_commits.items():
        if commits:
            click.echo(
                f"\n{header('Total unparsed commits in ')}{click.style(repo, fg='blue')}: "
                f"{click.style(str(len(commits)), fg='red')}"
            )


@click.command()
@click.argument('output_file', type=click.Path(dir_okay=False, path_type=Path))
@click.option('--version', 'release_version', help='Version to release')
@click.option('--name', help='Name of the release')
@click.option('--description', help='Description of the release')
@click.option('--exclude-story-id', type=int, multiple=True,
              help='Id of story to exclude, can be used multiple times')
@click.option('--exclude-story-label', multiple=True,
              help='Label of story to exclude, can be used multiple times - has priority '
                   'over --include-story-label if a story is tagged with both')
@click.option('--include-story-label', multiple=True,
              help='Label of story to include, can be used multiple times')
@click.option('--exclude-unparsed-commits', is_flag=True, help='Exclude unparsed commits')
@click.option('--workers', type=int, help='Number of concurrent workers')
@click.pass_context
def generate(ctx, output_file, release_version, name, description, exclude_story_id,
             exclude_story_label, include_story_label, exclude_unparsed_commits, workers):
    """Generate release notes into OUTPUT_FILE."""
    logger = ctx.obj['logger']

    filter_config = FilterConfig.from_options(
        exclude_story_id=exclude_story_id,
        exclude_story_label=exclude_story_label,
        include_story_label=include_story_label,
        exclude_unparsed_commits=exclude_unparsed_commits,
    )

    client = None
    try:
        app_config = get_app_config(ctx.obj['config_file'])
        settings = get_settings(workers=workers)
        template = FileTemplate.from_path(app_config.template_file)
        client = ShortcutClient(settings, logger)

        logger.info(f"Generating release notes for {len(app_config.repositories)} repositories")
        snapshot = build_release(
            app_config.repository_refs(),
            filter_config,
            StoryResolver(client, workers=settings.workers),
            workers=settings.workers,
        )

        print_summary(snapshot)
        template.render_to_file(
            snapshot, output_file,
            name=name, version=release_version, description=description,
        )
    except StorynotesError as e:
        logger.debug("Release notes generation failed", exc_info=True)
        click.echo(click.style(f"Error: {e}", fg='red'), err=True)
        sys.exit(1)
    finally:
        if client is not None:
            client.close()

    click.echo(f"\nRelease notes saved to: {output_file}")
