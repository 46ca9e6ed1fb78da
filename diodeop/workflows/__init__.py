# diodeop/workflows/__init__.py
