# diodeop/postprocess/__init__.py
