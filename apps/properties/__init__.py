"""Properties app package.

This app encapsulates property listings: the property model with its
pricing config, the public catalogue API and the booked-dates calendar
consumed by the reservation date picker.
"""
