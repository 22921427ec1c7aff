"""Command-line interface for git-branch-ensure"""

import os
import sys
from typing import List, Optional

from rich.console import Console

from git_branch_ensure.cli.args import parse_args
from git_branch_ensure.config import Config
from git_branch_ensure.logging_config import setup_logging
from git_branch_ensure.services.branch_ensurer import BranchEnsurer
from git_branch_ensure.services.github_service import GitHubRefClient
from git_branch_ensure.services.repository_service import resolve_repository

console = Console()


def write_github_output(existed: bool) -> None:
    """Expose the result as a step output when running in GitHub Actions."""
    output_path = os.environ.get("GITHUB_OUTPUT")
    if not output_path:
        return
    with open(output_path, "a", encoding="utf-8") as output:
        output.write(f"existed={'true' if existed else 'false'}\n")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    debug = False
    try:
        parsed_args = parse_args(argv)
        debug = parsed_args.debug

        setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

        config = Config(
            base_branch=parsed_args.base,
            github_api_url=parsed_args.api_url,
            repository=parsed_args.repo,
            max_creation_attempts=parsed_args.max_creation_attempts,
            max_verification_attempts=parsed_args.max_verification_attempts,
            verification_base_delay_ms=parsed_args.base_delay_ms,
            verbose=parsed_args.verbose,
            debug=parsed_args.debug,
        )

        if parsed_args.debug:
            console.print("[yellow]Debug mode enabled[/yellow]")
            console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                console.print(f"  {key}: {value}")

        repository = resolve_repository(config.repository, os.getcwd())

        with GitHubRefClient.from_config(config) as client:
            ensurer = BranchEnsurer.from_config(client, repository, config)
            outcome = ensurer.ensure(parsed_args.branch, config.base_branch)

        if outcome.existed_already:
            console.print(f"[green]Branch {parsed_args.branch} already exists in {repository}[/green]")
        else:
            console.print(
                f"[green]Created branch {parsed_args.branch} from {config.base_branch} in {repository}[/green]"
            )
        write_github_output(outcome.existed_already)

        return 0
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        if debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
