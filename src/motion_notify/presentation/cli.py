"""CLI interface: queue one picture upload, or run the worker with --start."""
import sys
import logging
import argparse
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from motion_notify.domain.models import Job
from motion_notify.domain.exceptions import ConfigurationError, DomainException
from motion_notify.application.client import UploadClient
from motion_notify.application.launcher import Launcher
from motion_notify.application.service import build_worker_service
from motion_notify.infrastructure.config import ConfigLoader, UploaderSettings, DEFAULT_ENDPOINT
from motion_notify.infrastructure.ipc import RemoteEndpoint, WorkerStub
from motion_notify.infrastructure.storage import PidMarker
from motion_notify.shared.logging import PACKAGE_LOGGER, get_logger, setup_logger
from motion_notify.shared.retry import RetryStrategy

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="motion-notify",
        description="Queue a picture for upload to cloud storage through a background worker",
    )
    parser.add_argument('--folder-id', '-f', help='Parent folder (key prefix) in the bucket')
    parser.add_argument('--config', '-c', type=Path, help='YAML file with storage credentials')
    parser.add_argument('--datetime', '-d', dest='event_time', help='Date and time of event (YYYY-mm-dd HH:MM:SS)')
    parser.add_argument('--frame', '-F', help='Frame number')
    parser.add_argument('--picture', '-p', type=Path, help='Full path of picture')
    parser.add_argument('--endpoint', '-D', help=f'Worker endpoint (default: {DEFAULT_ENDPOINT})')
    parser.add_argument('--no-unlink', '-U', action='store_true', help='Keep pictures after upload')
    parser.add_argument('--pid', '-P', type=Path, help='PID marker file guarding worker spawns')
    parser.add_argument('--log', '-l', type=Path, help='Append logs to this file')
    parser.add_argument('--reclaim-stale', action='store_true',
                        help='Replace a PID marker whose process is no longer running')
    parser.add_argument('--start', action='store_true', help='Run the worker instead of queueing a picture')
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose')
    return parser


def parse_event_time(value: str) -> datetime:
    """Parse the --datetime value."""
    try:
        return datetime.strptime(value, DATETIME_FORMAT)
    except ValueError:
        raise ConfigurationError(f"{value} is not a valid datetime")


def missing_options(args: argparse.Namespace) -> List[str]:
    """List every required option absent for the selected mode."""
    required = [('folder_id', '--folder-id'), ('config', '--config')]
    if not args.start:
        required += [
            ('event_time', '--datetime'),
            ('frame', '--frame'),
            ('picture', '--picture'),
        ]
    return [f"{flag} is required" for attr, flag in required if getattr(args, attr) is None]


def load_settings(args: argparse.Namespace) -> UploaderSettings:
    """Validate arguments and merge them with the environment."""
    problems = missing_options(args)
    if problems:
        raise ConfigurationError("\n".join(problems))

    overrides = {
        'folder_id': args.folder_id,
        'endpoint': args.endpoint,
        'pid_path': args.pid,
        'log_path': args.log,
    }
    if args.no_unlink:
        overrides['unlink'] = False
    if args.reclaim_stale:
        overrides['reclaim_stale_marker'] = True

    settings = ConfigLoader(config_path=args.config).load_settings(overrides=overrides)
    # Fail on a bad endpoint before anything is queued or spawned
    RemoteEndpoint.parse(settings.endpoint)
    if not args.start and settings.pid_path is None:
        raise ConfigurationError("--pid is required")
    return settings


def build_job(args: argparse.Namespace, settings: UploaderSettings) -> Job:
    timestamp = parse_event_time(args.event_time)
    try:
        return Job(
            timestamp=timestamp,
            sequence_tag=str(args.frame),
            source_path=args.picture.absolute(),
            delete_after_upload=settings.unlink,
        )
    except ValueError as e:
        raise ConfigurationError(str(e)) from e


def run_worker(settings: UploaderSettings) -> int:
    """Serve until terminated; returns the process exit code."""
    credentials = ConfigLoader(config_path=settings.config_path).load_credentials()
    build_worker_service(settings, credentials).run()
    return 0


def run_client(settings: UploaderSettings, job: Job) -> int:
    """Hand one job to the worker, starting it if needed."""
    stub = WorkerStub(RemoteEndpoint.parse(settings.endpoint))
    launcher = Launcher(settings, PidMarker(settings.pid_path))
    retry = RetryStrategy(
        max_attempts=settings.retry_attempts,
        backoff_seconds=settings.retry_interval,
    )
    try:
        UploadClient(stub, launcher, retry).submit(job)
    finally:
        stub.close()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    load_dotenv()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    setup_logger(PACKAGE_LOGGER, level=log_level)
    logger = get_logger(__name__)

    # In --start mode the marker is released on every exit path, startup failures included
    worker_marker = PidMarker(args.pid) if args.start and args.pid is not None else None
    try:
        settings = load_settings(args)
        if settings.log_path is not None:
            setup_logger(PACKAGE_LOGGER, level=log_level, log_file=settings.log_path)

        if args.start:
            if settings.pid_path is not None:
                worker_marker = PidMarker(settings.pid_path)
            return run_worker(settings)

        job = build_job(args, settings)
        return run_client(settings, job)

    except ConfigurationError as e:
        print(e)
        parser.print_help()
        return 2
    except DomainException as e:
        logger.error(f"{e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130
    except Exception as e:
        logger.exception(f"Error: {e}")
        return 1
    finally:
        if worker_marker is not None:
            worker_marker.remove()


if __name__ == '__main__':
    sys.exit(main())
