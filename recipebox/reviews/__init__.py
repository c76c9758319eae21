"""
Per-recipe user reviews, seeded from the catalog's sample reviews.
"""
