import argparse
import logging
import sys
from contextlib import ExitStack

from extpoly.algorithms.builder import mixing_string
from extpoly.algorithms.config import EngineConfig
from extpoly.config import PROGRESS_INTERVAL
from extpoly.system.polynomial import Polynomial
from extpoly.utils.exceptions import ExtPolyError
from extpoly.utils.log_config import logger


def build_parser():
    parser = argparse.ArgumentParser(prog='extpoly',
            description="Multiply sparse multivariate polynomials through external term files.")
    parser.add_argument('--no-simplify', action='store_true',
            help="Keep the raw cross product instead of merging like terms.")
    parser.add_argument('-o', '--output', type=str, default=None,
            metavar='FILE',
            help="Write the result as key=coefficient lines in ascending degree order.")
    parser.add_argument('--interval', type=float, default=PROGRESS_INTERVAL,
            metavar='SECONDS',
            help="Seconds between progress reports of the growing product.")
    parser.add_argument('--memory', action='store_true',
            help="Keep terms in memory instead of temporary files.")
    parser.add_argument('-q', '--quiet', action='store_true',
            help="Print the number of terms instead of the polynomial.")
    parser.add_argument('-v', '--verbose', action='store_true',
            help="Enable debug logging.")
    commands = parser.add_subparsers(dest='command', required=True)

    multiply = commands.add_parser('multiply',
            help="Multiply polynomial strings, e.g. '1 + x^50' '1 + y^100'.")
    multiply.add_argument('polynomials', nargs='+', metavar='POLYNOMIAL')

    mix = commands.add_parser('mix',
            help="Multiply mixing polynomials 1 + v^k + ... + v^(nk).")
    mix.add_argument('spec', nargs='+', metavar='N K VAR',
            help="Triples of piece count, step and variable name.")
    return parser


def _mixing_triples(parser, values):
    if len(values) % 3:
        parser.error("mix expects triples of N K VAR.")
    triples = []
    for i in range(0, len(values), 3):
        n, k, variable = values[i:i + 3]
        try:
            triples.append((int(n), int(k), variable))
        except ValueError:
            parser.error(f"N and K must be integers, got {n!r} and {k!r}.")
    return triples


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    if args.interval <= 0:
        parser.error("--interval must be positive.")
    config = EngineConfig(backend='memory' if args.memory else 'file',
                          progress_interval=args.interval)

    with ExitStack() as stack:
        try:
            if args.command == 'multiply':
                factors = [stack.enter_context(Polynomial.from_string(text, config))
                           for text in args.polynomials]
            else:
                factors = [stack.enter_context(Polynomial.from_string(mixing_string(n, k, variable), config))
                           for (n, k, variable) in _mixing_triples(parser, args.spec)]
            result = factors[0]
            for factor in factors[1:]:
                result = stack.enter_context(result * factor)
                logger.debug("Partial product: %d terms", len(result))
            if not args.no_simplify:
                result.simplify()
            if args.output:
                path = result.save_ordered_by_degree(args.output)
                logger.info("Result written to %s", path)
            print(len(result) if args.quiet else result)
        except (ExtPolyError, ValueError) as exc:
            logger.error("%s", exc)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
