#!/usr/bin/env python3
"""
validators
----------
Validation tools for extracted dream entries.

This package contains:
- entry: Structural checks for a single DreamEntry (date, title, content,
  metrics, word count, source)

Validators report defects as lists of strings and never raise; the
content parser attaches them to each entry as warnings.

Usage:
    from oneiro.validators.entry import validate_entry
"""
from oneiro.validators.entry import validate_entry

__all__ = ["validate_entry"]
