"""
StubTap CLI

Command-line interface for the StubTap stub server.

Commands:
    serve       - Load a stub directory and start the stub server
    check       - Load a stub directory and print what was registered

Examples:
    # Start server with stubs from a directory
    stubtap serve --stub-dir stubs/ --port 4771

    # Verify stub files load
    stubtap check stubs/
"""

import argparse
import logging
import sys

from .common import get_env_setting
from .stub import StubRepository, StubLoader, StubServer, StubServerConfig


def _configure_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )


def cmd_serve(args):
    """
    Load stubs and start the stub server.

    Args:
        args: Parsed command-line arguments
    """
    _configure_logging(args.log_level)

    repository = StubRepository()
    if args.stub_dir:
        StubLoader(repository).load_directory(args.stub_dir)

    config = StubServerConfig(
        host=args.host,
        port=args.port,
        log_level=args.log_level,
        admin_enabled=not args.no_admin
    )

    print(f"🎭 StubTap Stub Server")
    print(f"   Stubs loaded: {repository.count()}")
    print(f"   Listening on: http://{config.host}:{config.port}")

    server = StubServer(repository=repository, config=config)
    server.start()


def cmd_check(args):
    """
    Load a stub directory and print a summary without serving.

    Exits with status 1 when no stub could be loaded.

    Args:
        args: Parsed command-line arguments
    """
    _configure_logging(args.log_level)

    repository = StubRepository()
    loader = StubLoader(repository)
    loaded = loader.load_directory(args.stub_dir)

    print(f"📂 {args.stub_dir}: {loaded} stubs loaded, {loader.skipped_files} files skipped")
    for service, methods in sorted(repository.snapshot().items()):
        print(f"   {service}")
        for method, stubs in sorted(methods.items()):
            print(f"     {method}: {len(stubs)} stubs")

    if loaded == 0:
        sys.exit(1)


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="StubTap - Stub server for request/response mocking",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Start server with stubs from a directory
  %(prog)s serve --stub-dir stubs/ --port 4771

  # Verify stub files load
  %(prog)s check stubs/

Environment:
  STUBTAP_STUB_DIR, STUBTAP_HOST, STUBTAP_PORT, STUBTAP_LOG_LEVEL and
  STUBTAP_ADMIN_ENABLED provide defaults for the serve options.
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    log_levels = ['debug', 'info', 'warning', 'error']
    env_config = StubServerConfig.from_env()

    # --- SERVE command ---
    serve_parser = subparsers.add_parser('serve', help='Start stub server')
    serve_parser.add_argument('--stub-dir', default=get_env_setting('stub_dir'),
                              help='Directory of stub definition files')
    serve_parser.add_argument('--host', default=env_config.host,
                              help='Host to bind (default: 127.0.0.1)')
    serve_parser.add_argument('-p', '--port', type=int, default=env_config.port,
                              help='Port to bind (default: 4771)')
    serve_parser.add_argument('--log-level', default=env_config.log_level, choices=log_levels,
                              help='Log level (default: info)')
    serve_parser.add_argument('--no-admin', action='store_true', default=not env_config.admin_enabled,
                              help='Disable admin API')

    # --- CHECK command ---
    check_parser = subparsers.add_parser('check', help='Load stub directory and print summary')
    check_parser.add_argument('stub_dir', help='Directory of stub definition files')
    check_parser.add_argument('--log-level', default='warning', choices=log_levels,
                              help='Log level (default: warning)')

    args = parser.parse_args(argv)

    if args.command == 'serve':
        cmd_serve(args)
    elif args.command == 'check':
        cmd_check(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == '__main__':
    main()
