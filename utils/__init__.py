"""Shared helpers for the giveaway services (logging, errors, Redis)"""
