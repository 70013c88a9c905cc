"""
Statistics engine for SquadStats.

The aggregators in this package are pure folds over match event logs; the
stat cache writer and the event service are the only modules with side effects.
"""
