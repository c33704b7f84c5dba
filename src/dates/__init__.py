"""
Calendar arithmetic over timezone-aware instants.

Provides calendar units, an explicit calendar context (time zone and week
numbering rules), component decomposition, period start/end/next/previous
computation, interval measurement, and date comparisons against a clock.
"""
