"""
Continental v1.0 - Coefficient Rankings Engine

Turns continental knockout results into club and nation coefficient
rankings, and nation rankings into qualification-slot allocations for
next season's continental competitions.

Main components:
- records: Input record shapes (competitions, seasons, matches, nations, clubs)
- names: Name normalization and canonical-record lookup
- coefficients: Result resolution, point tables, ledgers, ranking
- db: Snapshot storage for computed coefficient tables
"""

__version__ = "1.0.0"
