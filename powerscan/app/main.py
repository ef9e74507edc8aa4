# powerscan/app/main.py
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence, TextIO

from ..adapters.discovery_mock import create_static_resolver
from ..adapters.discovery_zeroconf import ResolverConfig, create_resolver
from ..adapters.http_client import HttpConfig
from ..adapters.power_rest import PowerRestAdapter
from ..domain.config import DEFAULT_CONFIG, ScanConfig
from ..domain.ports import SessionError
from ..usecases.handle_entry import HandleEntry
from ..usecases.run_session import ResolverFactory, RunSession
from ..utils import logging as logging_utils

_log = logging.getLogger(__name__)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse CLI args for a discovery run."""
    parser = argparse.ArgumentParser(
        prog="powerscan",
        description="Discover Matter devices via mDNS and print their live power usage.",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Only list Matter devices with their name and firmware version",
    )
    return parser.parse_args(argv)


def build_session(
    *,
    config: ScanConfig = DEFAULT_CONFIG,
    resolver_factory: Optional[ResolverFactory] = None,
    out: Optional[TextIO] = None,
) -> RunSession:
    """Wire adapters and use cases into a ready-to-run session."""
    stream_out = out or sys.stdout
    if resolver_factory is None:
        if logging_utils.env_flag("POWERSCAN_OFFLINE"):
            _log.info("POWERSCAN_OFFLINE set; network discovery disabled")
            resolver_factory = create_static_resolver
        else:
            resolver_factory = create_resolver
    power = PowerRestAdapter(
        HttpConfig(
            request_timeout_s=config.fetch_timeout_s,
            body_snippet_bytes=config.body_snippet_bytes,
        )
    )
    handler = HandleEntry(power_port=power, out=stream_out, config=config)
    return RunSession(
        resolver_factory=resolver_factory,
        handle_entry=handler,
        resolver_config=ResolverConfig(),
        config=config,
        out=stream_out,
    )


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    session: Optional[RunSession] = None,
) -> int:
    """CLI entrypoint. Returns the process exit code."""
    args = _parse_args(argv)
    level = logging_utils.configure_root()
    _log.debug("Effective log level: %s", logging_utils.level_name(level))

    run = session or build_session()
    try:
        result = run(list_only=args.list)
    except SessionError as exc:
        print(exc.message, file=sys.stderr)
        return 1
    if result.interrupted:
        _log.warning("Discovery interrupted after %d device(s)", result.handled)
    return 0


if __name__ == "__main__":
    sys.exit(main())
