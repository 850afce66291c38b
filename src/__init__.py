"""
KHQR Gateway - Bakong KHQR Payment Integration Service

A FastAPI-based service that builds KHQR payment payloads, requests
deeplinks, and reconciles settlement status with the Bakong API.
"""

__version__ = "0.1.0"
