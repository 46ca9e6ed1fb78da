# diodeop/solver/__init__.py
