"""
Phusion Passenger entry point for shared hosting deployments of the API.
Passenger looks up the WSGI callable named 'application' in this file.
"""
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from app import application  # noqa: E402,F401
