"""Core analysis and scheduling logic.

This package contains pure business logic with no I/O dependencies
(no network, email, or clock access). Indicators, period summaries and
calendar arithmetic live here; the app/ package wires them to data
providers, the narrative service and the notifier.
"""
