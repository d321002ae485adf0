

import os
import sys
import logging
import argparse
import asyncio

# Required: Use uvloop for better performance
import uvloop
asyncio.set_event_loop_policy(uvloop.EventLoopPolicy())

# Add the current directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from configuration import (
    MAX_CONCURRENT_REQUESTS, MEASUREMENT_SECONDS, EXPORTER_PORT,
    REFRESH_INTERVAL_SECONDS
)

# Set up logging (only if not already configured)
if not logging.root.handlers:
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logging.getLogger('aiohttp').setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


class FastBenchCLI:
    """Simple CLI interface for the fast.com throughput benchmark."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self):
        """Create the main argument parser."""
        parser = argparse.ArgumentParser(
            description='fast.com download throughput benchmark',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Measure download throughput once
  python cli.py measure

  # Shorter window with fewer connections
  python cli.py measure --duration 5 --concurrency 4

  # Serve Prometheus metrics, measuring every 10 minutes
  python cli.py export --port 9876 --refresh-interval 600
            """
        )
        parser.add_argument('--debug', action='store_true', help='Enable debug logging')

        subparsers = parser.add_subparsers(dest='command', help='Available commands')

        # Measure command
        measure_parser = subparsers.add_parser('measure', help='Run a single measurement')
        self._add_measurement_arguments(measure_parser)

        # Export command
        export_parser = subparsers.add_parser('export', help='Serve measurements as Prometheus metrics')
        self._add_measurement_arguments(export_parser)
        export_parser.add_argument('--port', type=int, default=EXPORTER_PORT,
                                 help=f'Port to serve metrics on (default: {EXPORTER_PORT})')
        export_parser.add_argument('--refresh-interval', type=float, default=REFRESH_INTERVAL_SECONDS,
                                 help=f'Seconds between measurements (default: {REFRESH_INTERVAL_SECONDS:.0f})')

        return parser

    @staticmethod
    def _add_measurement_arguments(parser):
        parser.add_argument('--duration', type=float, default=MEASUREMENT_SECONDS,
                            help=f'Measurement window in seconds (default: {MEASUREMENT_SECONDS})')
        parser.add_argument('--concurrency', type=int, default=MAX_CONCURRENT_REQUESTS,
                            help=f'Maximum concurrent downloads (default: {MAX_CONCURRENT_REQUESTS})')

    @staticmethod
    def _create_measurement(system, args):
        from algorithms.downloader import StreamingDownloader
        from algorithms.measurement import ThroughputMeasurement

        return ThroughputMeasurement(
            url_source=system,
            fetcher=StreamingDownloader(system),
            max_concurrency=args.concurrency,
            duration_seconds=args.duration,
        )

    async def run_measure(self, args):
        """Run a single measurement."""
        try:
            from systems.fast import FastSystem

            logger.info("=== Download Measurement ===")

            async with FastSystem() as system:
                result = await self._create_measurement(system, args).run()

            print(f"{result.bytes_per_second:.0f} bytes/s ({result.megabits_per_second:.2f} Mbps)")
            return 0

        except Exception as e:
            logger.error(f"Error in measurement: {e}")
            return 1

    async def run_export(self, args):
        """Run the Prometheus exporter until interrupted."""
        try:
            from systems.fast import FastSystem
            from observability.exporter import FastExporter

            logger.info("=== Prometheus Exporter ===")

            async with FastSystem() as system:
                exporter = FastExporter(
                    lambda: self._create_measurement(system, args),
                    port=args.port,
                    refresh_interval_seconds=args.refresh_interval,
                )
                await exporter.run_forever()
            return 0

        except Exception as e:
            logger.error(f"Error in exporter: {e}")
            return 1

    def run(self, args=None):
        """Run the CLI with the given arguments."""
        if args is None:
            args = sys.argv[1:]

        parsed_args = self.parser.parse_args(args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        if parsed_args.debug:
            logging.getLogger().setLevel(logging.DEBUG)

        try:
            if parsed_args.command == 'measure':
                return asyncio.run(self.run_measure(parsed_args))
            elif parsed_args.command == 'export':
                return asyncio.run(self.run_export(parsed_args))
            else:
                logger.error(f"Unknown command: {parsed_args.command}")
                return 1

        except KeyboardInterrupt:
            logger.info("Operation interrupted by user")
            return 1
        except Exception as e:
            logger.error(f"Unexpected error: {e}")
            return 1


def main():
    """Main entry point."""
    cli = FastBenchCLI()
    sys.exit(cli.run())


if __name__ == '__main__':
    main()
