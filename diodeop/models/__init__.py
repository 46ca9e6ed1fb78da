# diodeop/models/__init__.py
