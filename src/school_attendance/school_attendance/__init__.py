"""School Attendance package.

Organized by feature modules (students, classes, attendance, reports, ...)
with a thin Flask controller layer over service/repository layers.
"""
