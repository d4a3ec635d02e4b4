#!/usr/bin/env python3
"""A CLI for the ism7_tx library: parse telegram logs, show discovery, encode writes."""

from __future__ import annotations

from .client import cli, main

__all__ = ["cli", "main"]
