"""
NimbusSync Client - Main Entry Point

This is the main entry point for the NimbusSync metadata tools.

Author: NimbusSync Project
"""

import sys
import argparse


def main():
    """
    Main entry point for NimbusSync client.

    Parses command-line arguments and runs the requested CLI operation.
    """
    parser = argparse.ArgumentParser(
        description='NimbusSync - Cloud Storage Metadata Tools'
    )

    parser.add_argument('operation', choices=['list', 'info', 'export', 'import'],
                        help='Operation to perform: list, info, export or import')

    parser.add_argument('argument', nargs='?',
                        help='Remote path (list, info) or snapshot file (export, import)')

    args = parser.parse_args()

    if args.operation in ('export', 'import') and not args.argument:
        parser.error(f"{args.operation} requires a snapshot file")

    from cli import run_cli_operation
    return run_cli_operation(args.operation, args.argument)


if __name__ == '__main__':
    sys.exit(main())
