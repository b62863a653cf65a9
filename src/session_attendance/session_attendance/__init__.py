"""Session Attendance package.

Tracks attendance for scheduled group sessions and notifies participants only when
their attendance outcome is new or has changed. Organized by feature modules
(sessions, users, attendance, identity, notifications, progress) with a thin Flask
controller layer over service/repository layers.
"""
