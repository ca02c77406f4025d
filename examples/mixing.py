"""Example script: counting mixed payments with mixing polynomials.

Run with
    python examples/mixing.py
"""

import logging
import os
import sys

# Add the project src directory to the Python path so that absolute imports work when
# the script is executed from the project root.
sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from extpoly import EngineConfig, Polynomial
from extpoly.utils.log_config import logger

# (pieces, denomination) of the wallet
WALLET = [(4, 25), (10, 10), (20, 5)]
AMOUNT = 100


def main() -> None:
    """Multiply one mixing polynomial per denomination and read off the payments."""

    config = EngineConfig(backend="file", progress_interval=5.0)
    logger.info("Counting the ways to pay %d with %s", AMOUNT, WALLET)

    factors = [Polynomial.mixing(n, k, "x", config) for n, k in WALLET]
    partials = []
    try:
        product = factors[0]
        for factor in factors[1:]:
            product = product * factor
            partials.append(product)
            logger.info("Partial product: %d raw terms", len(product))
        product.simplify()
        logger.info("Simplified product: %d terms", len(product))

        payments = dict(product.terms()).get(f"x^{AMOUNT}", 0.0)
        logger.info("Ways to pay %d: %d", AMOUNT, int(payments))
        product.print_ordered_by_degree(logging.DEBUG)
    finally:
        for poly in factors + partials:
            poly.close()


if __name__ == "__main__":
    main()
