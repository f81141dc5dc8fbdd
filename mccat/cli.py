# mccat/cli.py
import argparse
import sys

from .addressing import InvalidInput, resolve_endpoint
from .config import DEFAULT_CONFIG_PATH, load_config
from .mcast_socket import open_listener, open_sender
from .sessions import ListenSession, PingSession, SendSession
from .validation import RequestValidator

EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


class _ArgumentParser(argparse.ArgumentParser):
    """An ArgumentParser whose usage errors exit with status 1, not 2."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


def build_parser(config):
    parser = _ArgumentParser(
        prog="mccat", description="Listen, send or ping on an IP multicast group"
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to the configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--buffer-size",
        type=int,
        default=config["buffer_size"],
        help=(
            "Largest datagram or stdin chunk handled in one call "
            f"(default from config: {config['buffer_size']})"
        ),
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=config["ping_interval"],
        help=f"Seconds between PING probes (default from config: "
        f"{config['ping_interval']})",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("listen", "Join the group and print every datagram, answering PINGs"),
        ("send", "Send each chunk read from stdin to the group"),
        ("ping", "Send a PING to the group every interval and print replies"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("address", help="Multicast group IP address")
        sub.add_argument("port", help="UDP port")

    return parser


def run_session(mode, endpoint, settings):
    """Opens the socket for the requested mode and runs its session."""
    buffer_size = settings["buffer_size"]

    if mode == "listen":
        with open_listener(endpoint) as sock:
            ListenSession(sock, endpoint, buffer_size=buffer_size).run()
    elif mode == "send":
        with open_sender(endpoint) as sock:
            SendSession(sock, buffer_size=buffer_size).run()
    elif mode == "ping":
        with open_sender(endpoint, connect=False) as sock:
            PingSession(
                sock,
                endpoint,
                buffer_size=buffer_size,
                interval=settings["ping_interval"],
            ).run()
    else:
        # Not reachable once the request has been validated
        raise InvalidInput(f"Unknown mode: {mode}")


def main(argv=None):
    # The config file decides the option defaults, so find it first.
    pre_parser = _ArgumentParser(prog="mccat", add_help=False)
    pre_parser.add_argument("--config", default=DEFAULT_CONFIG_PATH)
    known, _ = pre_parser.parse_known_args(argv)
    config = load_config(known.config)

    args = build_parser(config).parse_args(argv)

    request = {
        "mode": args.command,
        "address": args.address,
        "port": args.port,
        "buffer_size": args.buffer_size,
        "ping_interval": args.interval,
    }

    try:
        request, error_message = RequestValidator().validate(request)
        if error_message:
            raise InvalidInput(error_message)

        endpoint = resolve_endpoint(request["address"], request["port"])
        run_session(request["mode"], endpoint, request)
    except KeyboardInterrupt:
        sys.exit(EXIT_INTERRUPTED)
    except (InvalidInput, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_FAILURE)
    except Exception as e:
        print(f"An unexpected error occurred: {e}", file=sys.stderr)
        sys.exit(EXIT_FAILURE)


if __name__ == "__main__":
    main()
