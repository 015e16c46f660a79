"""Studio Register package.

Attendance tracking for a dance studio: classes, students, register sessions,
a points ledger and periodic awards. Data lives in a local key-value store and
is reconciled opportunistically with a shared remote MySQL mirror.

The package is organized by feature modules (classes, students, register,
points, awards, ...) with a thin Flask controller layer on top of plain
service objects.
"""
