"""Application services.

Services coordinate the domain layer (core/, artifacts/) with
infrastructure (platform/, git/).
"""
