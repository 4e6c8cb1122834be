from __future__ import annotations

from pathlib import Path

import typer

from sfp.cli.context import CLIContext, build_context
from sfp.core.errors import ErrorCode
from sfp.git.repository import GitIdentity, Repository
from sfp.output.console import Style
from sfp.services.publish.executor import ScriptPublisher
from sfp.services.publish.model import PublishOptions
from sfp.services.publish.promotion import fetch_released_versions
from sfp.services.publish.service import PublishService


def resolve_options(
    ctx: CLIContext,
    *,
    artifact_dir: Path | None,
    promoted_only: bool,
    devhub_alias: str | None,
    script_path: Path | None,
    tag: str | None,
    git_tag: bool,
    push_git_tag: bool,
) -> PublishOptions:
    """Merge command flags over config file values."""
    cfg = ctx.config
    script = script_path or (Path(cfg.publish.script_path) if cfg.publish.script_path else None)
    if script is None:
        ctx.console.error("missing publish script")
        ctx.console.print("hint: pass --script-path or set publish.script_path", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    promoted = promoted_only or cfg.publish.promoted_only
    alias = devhub_alias or cfg.publish.devhub_alias
    if promoted and not alias:
        ctx.console.error("--promoted-only requires --devhub-alias")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return PublishOptions(
        artifact_dir=_under(ctx.cwd, artifact_dir or Path(cfg.publish.artifact_dir)),
        script_path=_under(ctx.cwd, script),
        promoted_only=promoted,
        devhub_alias=alias,
        run_tag=tag or cfg.publish.tag,
        create_tags=git_tag or cfg.git.create_tags,
        push_tags=push_git_tag or cfg.git.push_tags,
        git_identity=GitIdentity(name=cfg.git.user_name, email=cfg.git.user_email),
        pushgateway=cfg.metrics.pushgateway,
        metrics_job=cfg.metrics.job,
    )


def _under(root: Path, path: Path) -> Path:
    return path if path.is_absolute() else root / path


def publish(
    artifact_dir: Path | None = typer.Option(
        None, "--artifact-dir", "-d", help="Directory containing artifacts [default: artifacts]"
    ),
    promoted_only: bool = typer.Option(
        False, "--promoted-only", "-p", help="Only publish unlocked packages that are promoted"
    ),
    devhub_alias: str | None = typer.Option(
        None, "--devhub-alias", "-v", help="Dev Hub alias used to list released versions"
    ),
    script_path: Path | None = typer.Option(
        None, "--script-path", "-f", help="Script run once per artifact to publish it"
    ),
    tag: str | None = typer.Option(
        None, "--tag", "-t", help="Free-form tag attached to the run metrics"
    ),
    git_tag: bool = typer.Option(False, "--git-tag", help="Tag HEAD for each published package"),
    push_git_tag: bool = typer.Option(
        False, "--push-git-tag", help="Push created tags to the remote"
    ),
    config: Path | None = typer.Option(None, "--config", help="Config file [default: sfp.toml]"),
) -> None:
    """Publish built artifacts using a user-supplied script."""
    ctx = build_context(config)
    options = resolve_options(
        ctx,
        artifact_dir=artifact_dir,
        promoted_only=promoted_only,
        devhub_alias=devhub_alias,
        script_path=script_path,
        tag=tag,
        git_tag=git_tag,
        push_git_tag=push_git_tag,
    )

    service = PublishService(
        options=options,
        console=ctx.console,
        publisher=ScriptPublisher(
            script_path=options.script_path, cwd=ctx.cwd, platform=ctx.platform
        ),
        repo=Repository(ctx.cwd),
        released_query=lambda alias: fetch_released_versions(
            workspace_root=ctx.cwd, devhub_alias=alias
        ),
    )
    report = service.run()
    if report.exit_code != ErrorCode.OK:
        raise typer.Exit(code=int(report.exit_code))
