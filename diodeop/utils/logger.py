# -*- coding: utf-8 -*-
"""
Run-level messages for the operating-point workflow.

Timestamped; info goes to stdout next to the results report, warnings and
errors to stderr so a failed file write stands out from the numbers.
"""
import sys, time

TAG = "diodeop"

def _stamp() -> str:
    return f"[{time.strftime('%H:%M:%S')}] {TAG}:"

def info(msg: str):  print(f"{_stamp()} {msg}", file=sys.stdout)
def warn(msg: str):  print(f"{_stamp()} WARNING: {msg}", file=sys.stderr)
def error(msg: str): print(f"{_stamp()} ERROR: {msg}", file=sys.stderr)
