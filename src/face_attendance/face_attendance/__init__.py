"""Face Attendance package.

Feature modules (face, employees, attendance, recognition, ...) with a thin
Flask controller layer on top of service/repository layers.
"""
