from argparse import ArgumentParser

import uvicorn

from .lib.server_setup import create_server
from .lib.util import db_migration, init_logger, load_setting
from .types.cli import CLIArgs


def main():
    parser = ArgumentParser(
        "Typemonkey API",
        usage="Starts the backend server",
        description="The backend for the Typemonkey typing practice app",
    )
    parser.add_argument(
        "-c",
        "--setting",
        help="Path to setting.yaml file",
        dest="setting",
        default="setting.yaml",
    )
    parser.add_argument(
        "--init",
        help="Run init actions such as db migrations",
        dest="init",
        action="store_true",
    )
    args = parser.parse_args(namespace=CLIArgs)

    setting = load_setting(args.setting)
    init_logger(setting)

    if args.init:
        db_migration(setting)

    # start the server
    app = create_server(setting)
    uvicorn.run(
        app, host="0.0.0.0", port=setting.server.port, log_config=setting.logger
    )


if __name__ == "__main__":
    main()
