"""Geo Attendance package.

Feature modules (attendance, geofence, auth, notifications, ...) each carry a
domain model, a repository interface with a MySQL implementation, a service
layer and a thin Flask controller.
"""
