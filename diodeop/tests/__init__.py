# diodeop/tests/__init__.py
