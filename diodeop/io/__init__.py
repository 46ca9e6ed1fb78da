# diodeop/io/__init__.py
