import argparse
import logging
import sys
from datetime import date, datetime, timezone

from .errors import MiqatError
from .explanation import CalculationExplanation, explain
from .geo import Coordinates
from .hijri import convert
from .methods import CalculationParameters, HighLatitudeRule, Madhab, Method, create_parameters
from .prayers import DailyTimings, daily, monthly, yearly
from .seasonal import Shafaq
from .types import GeoDeg


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def setup_logging(verbose: bool = False) -> None:
    formatter = logging.Formatter('%(module)s: %(message)s')

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.addHandler(handler)


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='python -m miqat',
        description='Islamic prayer times and Hijri date, in UTC',
    )

    parser.add_argument(
        '-d', '--date', type=date.fromisoformat,
        help='ISO 8601 date to calculate; default today (UTC)',
    )
    parser.add_argument(
        '-x', '--longitude', type=GeoDeg,
        help='Home longitude in degrees (overrides .home.json)',
    )
    parser.add_argument(
        '-y', '--latitude', type=GeoDeg,
        help='Home latitude in degrees (overrides .home.json)',
    )

    parser.add_argument(
        '-m', '--method', default=None,
        help='Calculation method; one of ' + ', '.join(m.value for m in Method)
             + '. Default from .home.json, or Other',
    )
    parser.add_argument('--fajr-angle', type=float, help='Override the Fajr angle, degrees')
    parser.add_argument('--isha-angle', type=float, help='Override the Isha angle, degrees')
    parser.add_argument(
        '--isha-interval', type=float,
        help='Minutes from Maghrib to Isha; 0 to use the Isha angle',
    )
    parser.add_argument(
        '--madhab', type=Madhab,
        help='Asr convention; one of ' + ', '.join(m.value for m in Madhab),
    )
    parser.add_argument(
        '--high-latitude-rule', type=HighLatitudeRule,
        help='Fajr and Isha safeguard; one of ' + ', '.join(r.value for r in HighLatitudeRule),
    )
    parser.add_argument(
        '--shafaq', type=Shafaq,
        help='Evening twilight for the Moonsighting Committee method; one of '
             + ', '.join(s.value for s in Shafaq),
    )
    parser.add_argument(
        '--hijri-adjust', type=int, default=0,
        help='Days to add before the Hijri conversion; default 0',
    )

    group = parser.add_mutually_exclusive_group()
    group.add_argument('--month', action='store_true', help='The whole month of --date')
    group.add_argument('--year', action='store_true', help='The whole year of --date')
    group.add_argument(
        '-e', '--explain', action='store_true',
        help="Show the intermediate values of the day's calculation",
    )

    parser.add_argument('-w', '--workers', type=int, help='Threads for --month and --year')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')

    return parser


def print_day(result: DailyTimings, hijri_adjust: int) -> None:
    print(f'{result.date.isoformat()}  {convert(hijri_adjust, result.date)}')
    for timing in result.timings:
        marker = '*' if timing.is_fard else ' '
        print(f' {marker} {timing.event.value:<20} {timing.value.isoformat()}')


def print_explanation(explanation: CalculationExplanation) -> None:
    print('Calculation')
    for label, value in explanation.steps():
        print(f'   {label:<26} {value}')
    print('Hijri')
    for label, value in explanation.hijri.steps():
        print(f'   {label:<26} {value}')


def _first(*values: float | None) -> float | None:
    return next((value for value in values if value is not None), None)


def main() -> None:
    args = make_parser().parse_args()

    setup_logging(verbose=args.verbose)
    logger = logging.getLogger(__name__)

    from .files import load_home, load_parameters

    try:
        if args.longitude is None or args.latitude is None:
            home = load_home()
            coordinates = Coordinates(
                latitude=_first(args.latitude, home.latitude),
                longitude=_first(args.longitude, home.longitude),
            )
        else:
            coordinates = Coordinates(latitude=args.latitude, longitude=args.longitude)
        stored = load_parameters()
    except (FileNotFoundError, ValueError) as e:
        logger.error('Unusable settings: %s', e)
        sys.exit(2)

    if args.method is None:
        base = stored
    else:
        method = Method.parse(args.method)
        if method.value != args.method:
            logger.warning('Unknown method %s; using %s', args.method, method.value)
        base = CalculationParameters.for_method(method)

    params = create_parameters(
        method=base.method,
        fajr_angle=_first(args.fajr_angle, base.fajr_angle),
        isha_angle=_first(args.isha_angle, base.isha_angle),
        isha_interval=_first(args.isha_interval, base.isha_interval),
        madhab=args.madhab or base.madhab,
        high_latitude_rule=args.high_latitude_rule or base.high_latitude_rule,
        shafaq=args.shafaq or base.shafaq,
    )

    day = args.date or utc_today()
    logger.info(
        'Calculating for %.4f, %.4f with %s', coordinates.latitude, coordinates.longitude,
        params.method.value,
    )

    try:
        if args.month:
            results = monthly(
                coordinates, day.year, day.month, params, logger, max_workers=args.workers,
            )
        elif args.year:
            results = yearly(coordinates, day.year, params, logger, max_workers=args.workers)
        else:
            results = [daily(coordinates, day, params, logger)]
        explanation = None
        if args.explain:
            explanation = explain(coordinates, day, params, args.hijri_adjust, logger)
    except MiqatError as e:
        logger.error('%s', e)
        sys.exit(1)

    for result in results:
        print_day(result, args.hijri_adjust)
    if explanation is not None:
        print_explanation(explanation)
