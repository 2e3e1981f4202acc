"""Core scanner logic: indicators, models and the sniper strategy.

This package contains pure business logic with no I/O dependencies
(no network access). The app/ package wires it to market data clients,
the scan service and the HTTP API.
"""
