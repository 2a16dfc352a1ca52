"""CLI entry point for prompt-distiller."""

from __future__ import annotations

import sys
import time
from pathlib import Path

import click

from prompt_distiller import __version__


def _fail(message: str) -> None:
    click.echo(f'Error: {message}', err=True)
    sys.exit(1)


def _container(ctx: click.Context):
    """Build the dependency container on first use and cache it on the context."""
    if ctx.obj.get('container') is None:
        from prompt_distiller.l4_frameworks_and_drivers.container import (  # noqa: PLC0415 -- deferred: stores not touched on --help
            DependencyContainer,
        )
        from prompt_distiller.l4_frameworks_and_drivers.logging_setup import (  # noqa: PLC0415 -- deferred: no log file on --help
            setup_file_logging,
        )

        container = DependencyContainer(data_dir=ctx.obj['data_dir'], settings_path=ctx.obj['settings_path'])
        setup_file_logging(container.data_dir)
        ctx.obj['container'] = container
    return ctx.obj['container']


def _get_template(ctx: click.Context, template_id: str):
    template = _container(ctx).repository.get(template_id)
    if template is None:
        _fail(f'Template not found: {template_id}')
    return template


def _parse_pairs(pairs: tuple[str, ...], option: str) -> dict[str, str]:
    values: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition('=')
        if not sep or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got '{pair}'", param_hint=option)
        values[key.strip()] = value
    return values


def _read_content(content: str) -> str:
    return sys.stdin.read() if content == '-' else content


@click.group(invoke_without_command=True)
@click.option(
    '-d',
    '--data-dir',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Directory holding templates.json and draft.json.',
)
@click.option(
    '-c',
    '--config',
    'settings_path',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Path to the settings YAML file.',
)
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx, data_dir, settings_path):
    """prompt-distiller -- reusable prompt templates with variables, history and a clipboard watcher.

    Without a subcommand, opens the template library TUI.
    """
    ctx.ensure_object(dict)
    ctx.obj.setdefault('data_dir', data_dir)
    ctx.obj.setdefault('settings_path', settings_path)
    if ctx.invoked_subcommand is not None:
        return

    from prompt_distiller.l4_frameworks_and_drivers.apps.library import (  # noqa: PLC0415 -- deferred: Textual not loaded for subcommands
        LibraryApp,
    )

    container = _container(ctx)
    LibraryApp(controller=container.controller, watcher_factory=container.clipboard_watcher).run()


@cli.command('list')
@click.option('--category', default='All', show_default=True, help="Only templates in this category ('All' = every).")
@click.option('-s', '--search', default='', help='Case-insensitive match on name, content, categories and tags.')
@click.pass_context
def list_cmd(ctx, category, search):
    """List templates: pinned first, then most recently used."""
    templates = _container(ctx).repository.query(category, search)
    if not templates:
        click.echo('No templates.')
        return
    for t in templates:
        pin = '*' if t.pinned else ' '
        click.echo(f'{pin} {t.id:<14} {t.name:<28} [{", ".join(t.category)}] used {t.usage.count}x')


@cli.command()
@click.argument('content')
@click.option('-n', '--name', default='', help='Template name (default: "New Template").')
@click.option('-c', '--category', 'category_csv', default='', help='Comma-separated categories.')
@click.pass_context
def add(ctx, content, name, category_csv):
    """Save CONTENT as a new template ('-' reads it from stdin)."""
    result = _container(ctx).controller.save_template(_read_content(content), name, category_csv)
    if not result.ok:
        _fail(result.error)
    t = result.template
    click.echo(f'Saved {t.id} "{t.name}"')
    if t.variables:
        click.echo(f'Variables: {", ".join(v.key for v in t.variables)}')
    if t.tags:
        click.echo(f'Tags: {", ".join(t.tags)}')
    if result.similar_count:
        click.echo(f'Warning: found {result.similar_count} similar template(s)', err=True)


@cli.command()
@click.argument('template_id')
@click.pass_context
def show(ctx, template_id):
    """Show a template's details and content."""
    t = _get_template(ctx, template_id)
    click.echo(f'{t.name}{" (pinned)" if t.pinned else ""}')
    click.echo(f'id:         {t.id}')
    click.echo(f'categories: {", ".join(t.category)}')
    click.echo(f'tags:       {", ".join(t.tags) or "-"}')
    click.echo(f'variables:  {", ".join(v.key for v in t.variables) or "-"}')
    last = t.usage.last_used.isoformat() if t.usage.last_used else 'never'
    click.echo(f'usage:      {t.usage.count} (last {last})')
    click.echo(f'versions:   {len(t.history)}')
    click.echo('')
    click.echo(t.content)


@cli.command()
@click.argument('template_id')
@click.option('-v', '--value', 'pairs', multiple=True, metavar='KEY=VALUE', help='Variable value (repeatable).')
@click.option('--print/--no-print', 'print_result', default=False, help='Also print the filled text.')
@click.pass_context
def fill(ctx, template_id, pairs, print_result):
    """Fill a template's variables and copy the result to the clipboard."""
    from prompt_distiller.l2_use_cases.fill_template_use_case import (  # noqa: PLC0415 -- deferred: only needed here
        initial_values,
    )

    template = _get_template(ctx, template_id)
    values = {**initial_values(template), **_parse_pairs(pairs, '--value')}
    result = _container(ctx).controller.fill_and_copy(template.id, values)
    if print_result or not result.ok:
        click.echo(result.text)
    if not result.ok:
        _fail(result.error)
    click.echo('Copied to clipboard.', err=True)


@cli.command()
@click.argument('template_id')
@click.option('-n', '--name', default=None, help='New name.')
@click.option('--content', default=None, help="New content ('-' reads from stdin).")
@click.option('-c', '--category', 'category_csv', default=None, help='New comma-separated categories.')
@click.pass_context
def edit(ctx, template_id, name, content, category_csv):
    """Edit a template; a content change keeps the previous version in history."""
    from prompt_distiller.l1_entities.template import TemplatePatch  # noqa: PLC0415 -- deferred: only needed here

    patch = TemplatePatch(
        name=name,
        content=_read_content(content) if content is not None else None,
        category=category_csv.split(',') if category_csv is not None else None,
    )
    result = _container(ctx).repository.update(template_id, patch)
    if not result.ok:
        _fail(result.error)
    click.echo(f'Updated {template_id} ({len(result.template.history)} earlier versions)')


@cli.command('rm')
@click.argument('template_id')
@click.confirmation_option(prompt='Delete this template?')
@click.pass_context
def rm_cmd(ctx, template_id):
    """Delete a template."""
    if not _container(ctx).repository.delete(template_id):
        _fail(f'Template not found: {template_id}')
    click.echo(f'Deleted {template_id}')


@cli.command()
@click.argument('template_id')
@click.pass_context
def pin(ctx, template_id):
    """Toggle a template's pinned state."""
    repo = _container(ctx).repository
    if not repo.toggle_pin(template_id):
        _fail(f'Template not found: {template_id}')
    click.echo('Pinned' if repo.get(template_id).pinned else 'Unpinned')


@cli.command()
@click.argument('template_id')
@click.option('-t', '--threshold', default=0.3, show_default=True, type=click.FloatRange(0.0, 1.0))
@click.pass_context
def similar(ctx, template_id, threshold):
    """List templates whose wording overlaps with TEMPLATE_ID."""
    _get_template(ctx, template_id)
    matches = _container(ctx).repository.find_similar(template_id, threshold)
    if not matches:
        click.echo('No similar templates.')
    for m in matches:
        click.echo(f'{round(m.similarity * 100):>3}%  {m.template.id:<14} {m.template.name}')


@cli.command()
@click.argument('template_id')
@click.pass_context
def history(ctx, template_id):
    """List a template's earlier versions, oldest first."""
    t = _get_template(ctx, template_id)
    if not t.history:
        click.echo('No earlier versions.')
    for i, entry in enumerate(t.history, start=1):
        first_line = entry.content.split('\n', 1)[0]
        click.echo(f'{i:>2}  {entry.timestamp:%Y-%m-%d %H:%M:%S}  {first_line}')


@cli.command()
@click.argument('template_id')
@click.option(
    '--against',
    'version',
    default=1,
    show_default=True,
    type=click.IntRange(min=1),
    help='History entry to compare against (1 = oldest).',
)
@click.pass_context
def diff(ctx, template_id, version):
    """Compare an earlier version with the current content, line by line."""
    from prompt_distiller.l2_use_cases.utils.text_diff import format_diff  # noqa: PLC0415 -- deferred: only needed here

    t = _get_template(ctx, template_id)
    if t.history and version > len(t.history):
        _fail(f'Only {len(t.history)} earlier versions')
    lines = _container(ctx).controller.compare_with_version(template_id, version - 1)
    click.echo(format_diff(lines))


@cli.command()
@click.argument('template_id')
@click.argument('version', type=click.IntRange(min=1))
@click.pass_context
def restore(ctx, template_id, version):
    """Replace the current content with earlier VERSION (1 = oldest)."""
    t = _get_template(ctx, template_id)
    if not _container(ctx).controller.restore(t.id, version - 1):
        _fail(f'No version {version} (template has {len(t.history)})')
    click.echo(f'Restored {template_id} to version {version}')


@cli.command()
@click.pass_context
def watch(ctx):
    """Watch the clipboard and stage (or auto-capture) new text until Ctrl+C."""
    container = _container(ctx)
    controller = container.controller

    def _on_text(text: str) -> None:
        outcome = controller.on_clipboard_text(text)
        if outcome.saved:
            click.echo(f'Captured {outcome.created.template.id}: {outcome.preview}')
        else:
            click.echo(f'New clipboard text (kept as draft): {outcome.preview}')

    watcher = container.clipboard_watcher(_on_text)
    watcher.start()
    click.echo('Watching clipboard. Press Ctrl+C to stop.', err=True)
    try:
        while watcher.running:
            time.sleep(0.2)
    except KeyboardInterrupt:
        pass
    finally:
        watcher.stop()


@cli.command()
@click.option('--set', 'pairs', multiple=True, metavar='DOTTED.KEY=VALUE', help='Set a value (YAML scalar).')
@click.pass_context
def settings(ctx, pairs):
    """Show the effective settings, optionally changing some first."""
    import yaml  # noqa: PLC0415 -- deferred: only needed here
    from pydantic import ValidationError  # noqa: PLC0415 -- deferred: only needed here

    controller = _container(ctx).controller
    for dotted, raw in _parse_pairs(pairs, '--set').items():
        patch: dict = {}
        node = patch
        *parents, leaf = dotted.split('.')
        for part in parents:
            node = node.setdefault(part, {})
        node[leaf] = yaml.safe_load(raw)
        try:
            controller.apply_settings_patch(patch)
        except ValidationError as e:
            problems = '; '.join(f'{".".join(map(str, err["loc"]))}: {err["msg"]}' for err in e.errors())
            _fail(f'Invalid value for {dotted}: {problems}')
    click.echo(yaml.safe_dump(controller.settings.model_dump(), allow_unicode=True, sort_keys=False), nl=False)
