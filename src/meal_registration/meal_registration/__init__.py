"""Meal Registration package.

This package is organized by feature modules (cooking, penalty, orders,
registration, reporting, ...) with a thin Flask controller layer on top of
service/repository layers.
"""
