"""
Command line entry point for the trigger flow.

Usage:
    ci-trigger [OPTIONS]
    python -m trigger_runner [OPTIONS]

Environment Variables:
    GITLAB_PROJECT_ID: Project id or "group/project" path (required)
    GITLAB_PRIVATE_TOKEN: Private token for the API (required)
    GITLAB_BRANCH: Branch to check and build (default: master)
    GITLAB_WEEKS_LIMIT: Recency window in weeks (default: 2)
    GITLAB_API_URL: API base URL (default: https://gitlab.com/api/v4)
    GITLAB_TIMEOUT: Per-request timeout in seconds (default: 30)
    GITLAB_VERIFY_SSL: Verify TLS certificates (default: true)
    CI_TRIGGER_STRICT: Exit with status 1 when the flow fails (default: false)

Command line options override environment variables, which override the
config file (~/.ci-trigger/config).
"""

import json
import logging
import sys
from pathlib import Path

import click

from trigger_client.client import GitLabClient
from trigger_common.models import TriggerOutcome

from .config import ConfigError, load_config, load_env_file
from .flow import run_trigger_flow

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FLOW_FAILED = 1
EXIT_CONFIG_ERROR = 2


@click.command()
@click.option("--project-id", help="GitLab project id or group/project path")
@click.option("--token", "private_token", help="GitLab private token")
@click.option("--branch", help="Branch to check and build (default: master)")
@click.option("--weeks", "weeks_limit", type=int, help="Recency window in weeks (default: 2)")
@click.option("--api-url", help="API base URL (default: https://gitlab.com/api/v4)")
@click.option("--timeout", type=float, help="Per-request timeout in seconds (default: 30)")
@click.option(
    "--verify-ssl/--no-verify-ssl", default=None, help="Verify TLS certificates"
)
@click.option(
    "--strict/--no-strict",
    default=None,
    help="Exit with status 1 when an API call fails (default: exit 0)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file (default: ~/.ci-trigger/config)",
)
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path(".env"),
    show_default=True,
    help=".env file to load (ignored inside Docker)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default="INFO",
    show_default=True,
    help="Logging level",
)
@click.option("--json", "json_output", is_flag=True, help="Print the result as JSON")
def cli(
    project_id,
    private_token,
    branch,
    weeks_limit,
    api_url,
    timeout,
    verify_ssl,
    strict,
    config_path,
    env_file,
    log_level,
    json_output,
):
    """Trigger a GitLab pipeline if the branch has a recent commit, then play its first job."""
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    load_env_file(env_file)

    try:
        config = load_config(
            overrides={
                "project_id": project_id,
                "private_token": private_token,
                "branch": branch,
                "weeks_limit": weeks_limit,
                "api_url": api_url,
                "timeout": timeout,
                "verify_ssl": verify_ssl,
                "strict": strict,
            },
            config_path=config_path,
        )
        config.validate()
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    logger.debug(f"Configuration: {config.redacted()}")

    client = GitLabClient(
        project_id=config.project_id,
        private_token=config.private_token,
        api_url=config.api_url,
        timeout=config.timeout,
        verify_ssl=config.verify_ssl,
    )
    result = run_trigger_flow(
        client, branch=config.branch, weeks_limit=config.weeks_limit
    )

    if json_output:
        click.echo(json.dumps(result.to_dict(), indent=2))

    if result.outcome is TriggerOutcome.FAILED and config.strict:
        sys.exit(EXIT_FLOW_FAILED)
    sys.exit(EXIT_OK)


def main():
    """Main entry point for the ci-trigger CLI."""
    cli()


if __name__ == "__main__":
    main()
