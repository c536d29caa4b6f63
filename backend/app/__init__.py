"""Orchestration layer: settings, provider clients, scheduler and CLI."""
