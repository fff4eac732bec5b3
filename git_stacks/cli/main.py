"""Command-line interface for git-stacks"""

import os
import sys
from typing import List, Optional

from rich.console import Console

from git_stacks.cli.args import parse_args
from git_stacks.config import Config
from git_stacks.core.stack_keeper import StackKeeper
from git_stacks.logging_config import setup_logging

console = Console()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    parsed_args = None
    try:
        parsed_args = parse_args(argv)

        use_interactive = parsed_args.interactive or (
            sys.stdin.isatty() and sys.stdout.isatty() and not parsed_args.no_interactive
        )
        setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug, tui_mode=use_interactive)

        config = Config(
            remote_name=parsed_args.remote,
            trunk_branch=parsed_args.trunk,
            declutter_trunk=not parsed_args.full_trunk,
            watch=not parsed_args.no_watch,
            debounce_ms=parsed_args.debounce_ms,
            interactive=use_interactive,
            verbose=parsed_args.verbose,
            debug=parsed_args.debug,
        )

        if parsed_args.debug and not use_interactive:
            console.print("[yellow]Debug mode enabled[/yellow]")
            console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                console.print(f"  {key}: {value}")

        keeper = StackKeeper(os.path.abspath(parsed_args.path), config, tui_mode=use_interactive)

        if parsed_args.stage:
            keeper.set_staged(parsed_args.stage, staged=True)
        if parsed_args.unstage:
            keeper.set_staged(parsed_args.unstage, staged=False)

        if use_interactive:
            # TUI loads data in the background and refreshes on repository changes
            from git_stacks.tui import StacksApp
            app = StacksApp(keeper)
            app.run()
            return 0

        state = keeper.print_stacks()
        return 1 if state.error else 0
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        if parsed_args is not None and parsed_args.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
