"""Link command implementation."""

# ============================================================
# Imports
# ============================================================

from .config import Config
from .models import Counters
from .output import print_detail, print_summary
from .reconcile import reconcile


# ============================================================
# Entry Point
# ============================================================

def execute_link(config: Config) -> Counters:
    """
    Mirror the source tree into the destination tree.

    Steps:
    1. Validate the source root
    2. Walk the tree, linking or writing every included file
    3. Print the aggregate summary

    The summary is only printed when the walk completes; any error
    propagates before it.
    """
    config.validate()

    if config.verbose:
        print_detail(f"Root: {config.root}", color=config.color)
        print_detail(f"Home: {config.home}", color=config.color)
        if config.dry_run:
            print_detail("Dry run: no changes will be made", color=config.color)

    counters = reconcile(config)
    print_summary(counters, color=config.color)
    return counters
