"""Command-line entry point."""

import argparse
import os
import sys

from .command_link import execute_link
from .config import build_config
from .errors import DottyError
from .output import print_error, print_info


# ============================================================
# Arguments
# ============================================================

def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="dotty",
        description="Symlink a dotfiles tree into your home directory",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Descriptors:
  A file named <name>.lua next to <name> decides how <name> is linked.
  It returns false to skip the file, or a table with optional
  rename_to (string) and transform (function(content) -> string).
        """
    )
    parser.add_argument("--root", default=None,
                        help="source directory (default: ~/.dotfiles)")
    parser.add_argument("--home", default=None,
                        help="destination directory (default: $HOME)")
    parser.add_argument("--config", dest="config_path", default=None,
                        help="TOML config file (default: ~/.config/dotty/config.toml)")
    parser.add_argument("--dry-run", action="store_true",
                        help="print actions without executing them")
    parser.add_argument("--override-identical", action=argparse.BooleanOptionalAction, default=None,
                        help="replace existing files whose content is identical")
    parser.add_argument("-v", "--verbose", action=argparse.BooleanOptionalAction, default=None,
                        help="print descriptor and directory details")
    parser.add_argument("--color", action=argparse.BooleanOptionalAction, default=None,
                        help="force ANSI colors on or off (default: on for terminals)")
    return parser.parse_args(argv)


# ============================================================
# Main
# ============================================================

def main(argv=None):
    """Parse arguments, resolve configuration, and run the link command."""
    args = parse_args(argv)

    try:
        config = build_config(
            root=args.root,
            home=args.home,
            config_path=args.config_path,
            dry_run=args.dry_run,
            override_identical=args.override_identical,
            verbose=args.verbose,
            color=args.color,
            environ=os.environ,
            is_tty=sys.stdout.isatty(),
        )
        execute_link(config)
    except KeyboardInterrupt:
        print_info("\nInterrupted")
        sys.exit(130)
    except DottyError as e:
        print_error(str(e), color=sys.stderr.isatty() and args.color is not False)
        sys.exit(1)


if __name__ == "__main__":
    main()
