"""
RouteWatch runner.

Starts the resolver worker and polls the tracker on a fixed cadence,
logging every new statistics snapshot. The tracker throttles itself, so
the runner can poll far more often than the tracker recomputes.

Usage:
    python -m routewatch --callsign BAW123 [--navdb sqlite:///navdb.s3db]
"""

import argparse
import asyncio
import logging
from typing import Optional

from routewatch.config import config
from routewatch.errors import RouteEngineError
from routewatch.tracking import ResolverBridge, Tracker

logger = logging.getLogger(__name__)


def configure_logging(level: str = None) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or config.log_level), logging.WARNING),
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )


async def run_tracker(tracker: Tracker, interval: float = None, max_polls: Optional[int] = None) -> None:
    """
    Poll the tracker until cancelled (or ``max_polls`` polls).

    Failures are logged and retried at the next cycle.
    """
    interval = interval if interval is not None else config.tracker.runner_interval
    last = None
    polls = 0

    while max_polls is None or polls < max_polls:
        polls += 1
        try:
            stats = await tracker.statistics()
            if stats is not None and stats is not last:
                last = stats
                eta = f'{stats.eta:%H:%M}' if stats.eta else 'unknown'
                logger.info(
                    f'{tracker.callsign}: {stats.prev_waypoint} -> {stats.next_waypoint} '
                    f'({stats.dist_next_wp_nm:.1f}nm), progress {stats.progress_pct:.1f}%, '
                    f'deviation {stats.deviation_nm:.1f}nm, ETA {eta}'
                )
                if stats.in_loop or stats.stuck:
                    logger.warning(f'{tracker.callsign}: in_loop={stats.in_loop} stuck={stats.stuck}')
        except RouteEngineError as e:
            logger.error(f'Failed to get route statistics: {e}')
        except Exception as e:
            logger.exception(f'Unexpected tracker error: {e}')

        await asyncio.sleep(interval)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog='routewatch', description='Track a VATSIM flight against its filed route')
    parser.add_argument('-c', '--callsign', default=config.vatsim.callsign, help='Your callsign')
    parser.add_argument('--navdb', default=config.navdb.url, help='Navigation database URL')
    args = parser.parse_args(argv)
    if not args.callsign:
        parser.error('a callsign is required (--callsign or CALLSIGN)')
    return args


def main(argv=None) -> None:
    configure_logging()
    args = parse_args(argv)

    bridge = ResolverBridge.from_url(args.navdb)
    bridge.start()
    tracker = Tracker(args.callsign.upper(), bridge)

    logger.info(f'Tracking {tracker.callsign} with navigation database {args.navdb}')
    try:
        asyncio.run(run_tracker(tracker))
    except KeyboardInterrupt:
        logger.info('Interrupted')
    finally:
        tracker.close()


if __name__ == '__main__':
    main()
