"""Run configuration, built from command-line flags."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Config:
    """Options for one gorder run, passed explicitly to every file."""
    write_in_place: bool = False  # -w: rewrite files instead of printing
    backup: bool = False          # --backup: copy the file aside before -w
    verbose: bool = False         # -v: debug logging on stderr
