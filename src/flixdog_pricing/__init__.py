"""
FlixDog Pricing Package

Shared price calculation for the pet-friendly booking storefront.
Resolves experience, class and trip prices from provider cost using
percentage, markup or legacy flat pricing, and builds checkout quotes.
"""

__version__ = "1.0.0"
