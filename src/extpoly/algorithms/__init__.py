""" Term engine of :mod:`extpoly`: monomial keys, term stores, products.
"""
