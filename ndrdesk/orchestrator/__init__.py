"""Orchestration layer for NDRDesk: applies policy verdicts to courier requests."""
