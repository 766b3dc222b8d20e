#!/usr/bin/env python3
"""Basic usage example"""

import sys

from tau import config, dev, slog
from tau.slog import LoggerBuilder


def main():
    config.command_line.add_argument("--project", default="", help="Cloud project id")
    args = config.parse()

    # Package level logger writes to stdout
    slog.set_project(args.project)
    slog.info("Application started")

    # Entries carry context and branch without affecting each other
    entry = slog.with_labels({"component": "example"})
    entry.with_detail("attempt", 1).warn("This is warning")
    entry.with_error(ValueError("bad input")).error("This is error")

    # Operations group several entries
    op = entry.start_operation("op-1", "example")
    op.info("working")
    op.end_operation()

    # A dedicated logger with its own output
    logger = (LoggerBuilder()
        .with_output(sys.stderr)
        .with_sources(False)
        .build())
    logger.infof("%d entries written by the default logger", 5)

    dev.fail_fast(None)


if __name__ == "__main__":
    main()
